# SafeHer Assistant - Core Logic
#
# Lazy imports keep ``import assistant`` cheap for scripts that only need
# the keyword tables.

__all__ = ["AssistantConfig", "ConversationOrchestrator", "build_orchestrator"]


def __getattr__(name: str):
    if name == "AssistantConfig":
        from assistant.config import AssistantConfig
        return AssistantConfig
    if name in ("ConversationOrchestrator", "build_orchestrator"):
        from assistant.conversation import ConversationOrchestrator, build_orchestrator
        return ConversationOrchestrator if name == "ConversationOrchestrator" else build_orchestrator
    raise AttributeError(f"module 'assistant' has no attribute {name!r}")
