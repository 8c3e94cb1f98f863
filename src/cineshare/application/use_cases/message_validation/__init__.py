"""
Inbound realtime frame validation.
"""

from cineshare.application.use_cases.message_validation.validate_client_event import (
    ValidateClientEventUseCase,
)

__all__ = ["ValidateClientEventUseCase"]
