# Services package.
#
# Each module exposes async functions that encapsulate business logic and
# database access for one aggregate:
#
#   ad_service       - ads, their pictures, "my ads"
#   comment_service  - comments under an ad
#   user_service     - profile, password, avatar, account deletion
#   auth_service     - login check and registration
#   authorization    - the owner-or-admin rule shared by all of the above
#
# All service functions accept an AsyncSession as their first argument
# so that the router layer controls the transaction boundary via the
# ``get_db`` dependency.
