from passlib.context import CryptContext

import database
from config import settings
from errors import NotFound, ValidationError
from logger import get_logger
from schemas import User, UserCreate, UserLogin

logger = get_logger("users")

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

COLLECTION = "user"


def register(payload: UserCreate) -> dict:
    email = payload.email.lower()
    if database.get_collection(COLLECTION).find_one({"email": email}):
        raise ValidationError("Email already registered")
    user = User(
        name=payload.name,
        email=email,
        password_hash=pwd_context.hash(payload.password),
        is_admin=email in settings.admin_emails,
    )
    user_id = database.create_document(COLLECTION, user)
    logger.info(f"Registered user {user_id} (admin={user.is_admin})")
    return database.get_document(COLLECTION, user_id)


def login(creds: UserLogin) -> dict:
    doc = database.get_collection(COLLECTION).find_one({"email": creds.email.lower()})
    if not doc or not pwd_context.verify(creds.password, doc.get("password_hash", "")):
        raise ValidationError("Invalid email or password")
    return doc


def get_user(user_id: str) -> dict:
    user = database.get_document(COLLECTION, user_id)
    if user is None:
        raise NotFound("User not found")
    return user
