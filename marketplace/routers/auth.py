from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.database import get_db
from marketplace.schemas import Login, Register
from marketplace.services import auth_service

router = APIRouter(tags=["auth"])

@router.post("/login")
async def login(data: Login, db: AsyncSession = Depends(get_db)):
    if not await auth_service.login(db, data.username, data.password):
        raise HTTPException(status_code=401, detail="Invalid credentials")

@router.post("/register", status_code=201)
async def register(data: Register, db: AsyncSession = Depends(get_db)):
    if not await auth_service.register(db, data):
        raise HTTPException(status_code=400, detail="A user with this email already exists")
