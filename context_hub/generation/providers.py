"""Text-generation providers and credential-driven provider selection.

Providers are tried in a fixed priority order and the first one with a
credential wins:

1. Groq (free, fastest)
2. OpenRouter (cheapest paid)
3. Grok (X.AI)
4. OpenAI (fallback)
"""

from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Callable, Optional, Dict, Tuple, TYPE_CHECKING
import logging

from context_hub.generation.errors import ConfigurationError

if TYPE_CHECKING:
    from context_hub.application.config import AISettings

logger = logging.getLogger(__name__)

APP_TITLE = "Personal Context Hub"


class ProviderKind(Enum):
    """Supported text-generation backends."""
    GROQ = "groq"
    OPENROUTER = "openrouter"
    GROK = "grok"
    OPENAI = "openai"


@dataclass(frozen=True)
class ProviderDescriptor:
    """Static description of one OpenAI-compatible backend."""

    kind: ProviderKind
    display_name: str
    api_base_url: str
    model: str
    credential_env_var: str
    cost_description: str

    @property
    def key(self) -> str:
        return self.kind.value


PROVIDERS: Tuple[ProviderDescriptor, ...] = (
    ProviderDescriptor(
        kind=ProviderKind.GROQ,
        display_name="Groq",
        api_base_url="https://api.groq.com/openai/v1",
        model="llama-3.3-70b-versatile",
        credential_env_var="GROQ_API_KEY",
        cost_description="FREE",
    ),
    ProviderDescriptor(
        kind=ProviderKind.OPENROUTER,
        display_name="OpenRouter",
        api_base_url="https://openrouter.ai/api/v1",
        model="meta-llama/llama-3.1-8b-instruct",
        credential_env_var="OPENROUTER_API_KEY",
        cost_description="$0.06 per 1M tokens",
    ),
    ProviderDescriptor(
        kind=ProviderKind.GROK,
        display_name="Grok",
        api_base_url="https://api.x.ai/v1",
        model="grok-beta",
        credential_env_var="GROK_API_KEY",
        cost_description="$8/month + $25 credits",
    ),
    ProviderDescriptor(
        kind=ProviderKind.OPENAI,
        display_name="OpenAI",
        api_base_url="https://api.openai.com/v1",
        model="gpt-4o-mini",
        credential_env_var="OPENAI_API_KEY",
        cost_description="$0.15 per 1M tokens",
    ),
)


def get_descriptor(kind: ProviderKind) -> ProviderDescriptor:
    """Look up the descriptor of a provider."""
    for descriptor in PROVIDERS:
        if descriptor.kind is kind:
            return descriptor
    raise KeyError(kind)


def credential_for(settings: "AISettings", kind: ProviderKind) -> Optional[str]:
    """Return the provider's credential, or None when it is unset or blank."""
    if kind is ProviderKind.GROQ:
        value = settings.groq_api_key
    elif kind is ProviderKind.OPENROUTER:
        value = settings.openrouter_api_key
    elif kind is ProviderKind.GROK:
        value = settings.grok_api_key
    elif kind is ProviderKind.OPENAI:
        value = settings.openai_api_key
    else:
        raise ValueError(f"Unknown provider: {kind}")

    if value and value.strip():
        return value
    return None


@dataclass(frozen=True)
class ActiveProvider:
    """The resolved provider together with what is needed to call it."""

    descriptor: ProviderDescriptor
    api_key: str
    model: str
    headers: Dict[str, str]

    @property
    def name(self) -> str:
        return self.descriptor.display_name

    def info(self) -> Dict[str, str]:
        """Public description for status reporting. Never includes the key."""
        return {
            'key': self.descriptor.key,
            'name': self.descriptor.display_name,
            'model': self.model,
            'cost': self.descriptor.cost_description,
        }


class ProviderSelector:
    """Resolves the active provider once and keeps it for its lifetime.

    Later changes to the credentials are deliberately ignored. Two threads
    racing on the first resolution run the same deterministic scan, so no
    lock is taken.

    With a settings_factory, fresh settings are loaded before every scan
    until one succeeds, so credentials added later are still picked up.
    """

    def __init__(
        self,
        settings: "AISettings",
        settings_factory: Optional[Callable[[], "AISettings"]] = None
    ):
        self.settings = settings
        self.settings_factory = settings_factory
        self._active: Optional[ActiveProvider] = None

    def resolve(self) -> ActiveProvider:
        """Return the active provider, resolving it on first use."""
        if self._active is not None:
            return self._active

        if self.settings_factory is not None:
            self.settings = self.settings_factory()

        for descriptor in PROVIDERS:
            api_key = credential_for(self.settings, descriptor.kind)
            if not api_key:
                continue

            headers: Dict[str, str] = {}
            if descriptor.kind is ProviderKind.OPENROUTER:
                headers = {
                    'HTTP-Referer': self.settings.app_url,
                    'X-Title': APP_TITLE,
                }

            self._active = ActiveProvider(
                descriptor=descriptor,
                api_key=api_key,
                model=self.settings.ai_model or descriptor.model,
                headers=headers,
            )
            logger.info(
                f"AI Provider initialized: {descriptor.display_name} "
                f"({descriptor.cost_description})"
            )
            return self._active

        names = ", ".join(d.credential_env_var for d in PROVIDERS)
        raise ConfigurationError(f"No AI provider configured. Set one of {names}")

    def is_configured(self) -> bool:
        try:
            self.resolve()
            return True
        except ConfigurationError:
            return False

    def active_provider(self) -> Optional[Dict[str, str]]:
        """Describe the active provider, or None when nothing is configured."""
        try:
            return self.resolve().info()
        except ConfigurationError:
            return None


@lru_cache(maxsize=1)
def get_default_selector() -> ProviderSelector:
    """Process-wide selector that reads the environment until a provider resolves."""
    from context_hub.application.config import AISettings

    return ProviderSelector(AISettings(), settings_factory=AISettings)
