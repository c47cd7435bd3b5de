"""
Dépendances des routes / Route dependencies.
Injectées dans les routes via Depends().
"""

from fastapi import Request

from diesel_log.services.record_service import RecordService


def get_record_service(request: Request) -> RecordService:
    """Service construit au demarrage par create_app / Service built at startup by create_app."""
    return request.app.state.record_service
