# techserve/services/__init__.py
from .mpesa import daraja_client
from .notifier import email_sender, push_sender

# Export all service instances
__all__ = [
    "daraja_client",
    "email_sender",
    "push_sender"
]
