"""
Base Agent for JeevesBot
Defines abstract base class and common interfaces for all agents.

Agents hold the business logic that the transports (Telegram bot, REST
API, CLI) share:
- Each agent handles a specific domain (calendar, chat)
- Agents share a common interface and response structure
- All agents log their actions the same way
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
from datetime import datetime, timezone
import logging
import json


@dataclass
class AgentResponse:
    """
    Standard response structure from any agent.

    Attributes:
        success: Whether the operation completed successfully
        message: Human-readable description of the result, safe to show
            to an end user as-is
        data: Optional structured data (appointments, drafts, etc.)
        suggestions: Optional list of follow-up actions the user might want
    """
    success: bool
    message: str
    data: Optional[Dict[str, Any]] = None
    suggestions: Optional[List[str]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert response to dictionary for serialization."""
        return {
            "success": self.success,
            "message": self.message,
            "data": self.data,
            "suggestions": self.suggestions
        }

    @property
    def error_code(self) -> Optional[str]:
        """Machine-readable failure reason, if the agent set one."""
        if self.data:
            return self.data.get("error_code")
        return None

    @classmethod
    def error(cls, message: str, data: Optional[Dict[str, Any]] = None) -> 'AgentResponse':
        """Factory method for creating error responses."""
        return cls(success=False, message=message, data=data)

    @classmethod
    def ok(cls, message: str, data: Optional[Dict[str, Any]] = None,
           suggestions: Optional[List[str]] = None) -> 'AgentResponse':
        """Factory method for creating success responses."""
        return cls(success=True, message=message, data=data, suggestions=suggestions)


class BaseAgent(ABC):
    """
    Abstract base class for all JeevesBot agents.

    Provides common functionality for:
    - Store access
    - Configuration management
    - Logging
    - Intent matching

    Subclasses must implement:
    - can_handle(): Determine if agent can process given intent
    - process(): Execute the actual request handling
    - get_supported_intents(): Return list of intents this agent handles
    """

    def __init__(self, store, config, name: str):
        """
        Initialize the base agent.

        Args:
            store: Storage backend the agent works on
            config: Config instance for settings/preferences
            name: Unique identifier for this agent (e.g., "calendar", "chat")
        """
        self.store = store
        self.config = config
        self.name = name
        self.logger = logging.getLogger(f"agent.{name}")
        self._initialized = False

    def initialize(self) -> bool:
        """
        Perform any required agent initialization.

        Override in subclasses if agent needs startup configuration.
        Returns True if initialization successful.
        """
        self._initialized = True
        self.logger.info(f"{self.name} agent initialized")
        return True

    @abstractmethod
    def can_handle(self, intent: str, context: Dict[str, Any]) -> bool:
        """
        Determine if this agent can handle the given intent.

        Args:
            intent: The requested operation
            context: Additional context that may affect handling capability

        Returns:
            True if this agent can handle the intent, False otherwise
        """
        pass

    @abstractmethod
    def process(self, intent: str, context: Dict[str, Any]) -> AgentResponse:
        """
        Process the request and return a response.

        Args:
            intent: The requested operation
            context: Request parameters

        Returns:
            AgentResponse with success/failure status and relevant data
        """
        pass

    @abstractmethod
    def get_supported_intents(self) -> List[str]:
        """Return list of intents this agent can handle."""
        pass

    def log_action(self, action: str, details: Optional[Dict[str, Any]] = None) -> None:
        """
        Log an action taken by this agent.

        Args:
            action: Description of the action taken
            details: Optional additional details as key-value pairs
        """
        log_entry = {
            "agent": self.name,
            "action": action,
            "timestamp": datetime.now(timezone.utc).isoformat()
        }
        if details:
            log_entry["details"] = details

        self.logger.info(json.dumps(log_entry, default=str))

    def validate_required_params(self, context: Dict[str, Any],
                                  required: List[str]) -> Optional[AgentResponse]:
        """
        Validate that required parameters are present in context.

        Returns:
            AgentResponse with error if validation fails, None if valid
        """
        missing = [p for p in required if p not in context or context[p] is None]
        if missing:
            return AgentResponse.error(
                f"Missing required parameters: {', '.join(missing)}",
                data={"error_code": "invalid_input"}
            )
        return None

    def get_config_value(self, key: str, section: str = "preferences",
                         default: Any = None) -> Any:
        """Get a configuration value with fallback to default."""
        return self.config.get(key, section=section, default=default)
