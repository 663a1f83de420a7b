from pydantic import BaseModel, Field


class IdentityConfig(BaseModel):
    """Who the assistant is, and the strings shown by clients."""

    ai_name: str = Field(default="Spotter", description="Assistant's name")
    owner_name: str = Field(
        default="Jackson Attinger", description="Person the assistant works for"
    )
    owner_description: str = Field(
        default="a personal trainer who helps people build strength, "
        "train consistently and reach their fitness goals",
        description="Short description of the owner, provided to prompts",
    )
    chat_header: str = Field(
        default="How can I help you reach your goals?",
        description="Greeting shown when a conversation starts",
    )
    message_placeholder: str = Field(
        default="Let's get to work", description="Input prompt text"
    )
    page_title: str = Field(default="My Trainer", description="Client title")

    def prompt_vars(self) -> dict[str, str]:
        """Variables every prompt template may reference."""
        return {
            "ai_name": self.ai_name,
            "owner_name": self.owner_name,
            "owner_description": self.owner_description,
        }
