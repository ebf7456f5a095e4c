"""This file contains the schemas for the application."""
from app.schemas.auth import (
    AuthResponse,
    LoginRequest,
    ProfileResponse,
    ProfileUser,
    RegisterRequest,
    SessionUser,
)
from app.schemas.chat import ChatMessageIn, SaveMessageRequest
from app.schemas.chatbots import PublishRequest, UpdateChatbotRequest
from app.schemas.projects import CreateProjectRequest, SearchRequest, UpdateProjectRequest
from app.schemas.research import CompanyResearchRequest, ResearchResult, SearchResult

__all__ = [
    "AuthResponse",
    "LoginRequest",
    "ProfileResponse",
    "ProfileUser",
    "RegisterRequest",
    "SessionUser",
    "ChatMessageIn",
    "SaveMessageRequest",
    "PublishRequest",
    "UpdateChatbotRequest",
    "CreateProjectRequest",
    "UpdateProjectRequest",
    "SearchRequest",
    "CompanyResearchRequest",
    "ResearchResult",
    "SearchResult",
]
