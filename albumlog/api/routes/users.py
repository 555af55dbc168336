"""The fixed set of users who rate and annotate albums."""
from fastapi import APIRouter

from albumlog.config import USERS

router = APIRouter()


@router.get("")
def list_users():
    return {"users": [{"key": key, "label": key} for key in USERS]}
