"""
FastAPI dependencies used across routers.
Keep this file lean — it only hands out the per-app collaborators that
create_app() stored on app.state. Business logic belongs in services/.
"""
import razorpay
from fastapi import Request

from app.config import Settings
from app.services.payment_store import PaymentStore


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_razorpay_client(request: Request) -> razorpay.Client:
    return request.app.state.razorpay_client


def get_payment_store(request: Request) -> PaymentStore:
    return request.app.state.payment_store
