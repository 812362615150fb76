"""LangChain-based AI gateway.

All outbound model calls go through this module. The provider (Google
Gemini, OpenAI or Ollama) is picked from config, so callers never know
which one answers.

Every failure is absorbed here. Callers always receive a populated
``AIResponse`` and never an exception.
"""

import logging
from pathlib import Path
from typing import Any, Literal

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage

from fitboost.coaching import youtube_search_url
from fitboost.config import Settings, settings as default_settings
from fitboost.i18n_service import llm_language_instruction, translate
from fitboost.models import (
    AIResponse,
    AssistantType,
    ChatMessage,
    GroundingMetadata,
    GroundingSource,
    ScanType,
    UserProfile,
)

logger = logging.getLogger(__name__)

PROMPTS_DIR = Path(__file__).parent / "prompts"

LLMKind = Literal["chat", "vision"]

# Appended to every chat message so formatting rules survive long histories.
_MESSAGE_SUFFIX = (
    " (Responda em Markdown. Para exercícios, OBRIGATÓRIO incluir link "
    "[Assistir Vídeo no YouTube](URL). Para dieta, use GRAMAS)."
)
_VISION_SUFFIX = " Responda com um laudo técnico profissional e estruturado."

_ROLE_RULES: dict[str, str] = {
    "trainer": "trainer_rules.txt",
    "nutritionist": "nutritionist_rules.txt",
}

# Images required per scan: body = front + back, food = one plate.
REQUIRED_IMAGES: dict[str, int] = {"body": 2, "food": 1}

_NOT_PROVIDED = "não informado"


def get_llm(kind: LLMKind = "chat", settings: Settings | None = None) -> BaseChatModel:
    """Instantiate the configured chat model for a call type.

    Model name, temperature and output cap are fixed per *kind*.

    Args:
        kind: ``"chat"`` for conversations, ``"vision"`` for image analysis.
        settings: Optional settings override.

    Returns:
        A LangChain chat model instance.

    Raises:
        ValueError: If LLM_PROVIDER is set to an unrecognised value.
    """
    cfg = settings or default_settings
    if kind == "chat":
        model, temperature, max_tokens = (
            cfg.chat_model,
            cfg.chat_temperature,
            cfg.chat_max_output_tokens,
        )
    else:
        model, temperature, max_tokens = (
            cfg.vision_model,
            cfg.vision_temperature,
            cfg.vision_max_output_tokens,
        )

    if cfg.llm_provider == "google":
        from langchain_google_genai import ChatGoogleGenerativeAI

        return ChatGoogleGenerativeAI(
            model=model,
            google_api_key=cfg.google_api_key,  # type: ignore[arg-type]
            temperature=temperature,
            max_output_tokens=max_tokens,
        )
    elif cfg.llm_provider == "openai":
        from langchain_openai import ChatOpenAI

        return ChatOpenAI(
            model=model,
            api_key=cfg.openai_api_key,  # type: ignore[arg-type]
            temperature=temperature,
            max_tokens=max_tokens,  # type: ignore[call-arg]
        )
    elif cfg.llm_provider == "ollama":
        from langchain_ollama import ChatOllama

        return ChatOllama(
            model=model,
            base_url=cfg.ollama_base_url,
            temperature=temperature,
            num_predict=max_tokens,
        )
    else:
        raise ValueError(f"Unknown LLM_PROVIDER: '{cfg.llm_provider}'")


def _load_prompt(filename: str) -> str:
    """Read a prompt template file from the prompts directory."""
    return (PROMPTS_DIR / filename).read_text(encoding="utf-8")


def _describe(value: object, unit: str = "") -> str:
    if value is None:
        return _NOT_PROVIDED
    if hasattr(value, "value"):
        value = value.value
    return f"{value}{unit}"


def build_system_instruction(role: AssistantType, profile: UserProfile) -> str:
    """Render the role-specific instruction block for *profile*.

    Args:
        role: ``"trainer"`` or ``"nutritionist"``.
        profile: Snapshot of the signed-in user.

    Returns:
        The system prompt text.
    """
    profile_block = _load_prompt("profile_block.txt").format(
        name=profile.name,
        age=_describe(profile.age, " anos"),
        height=_describe(profile.height, "cm"),
        weight=_describe(profile.weight, "kg"),
        level=_describe(profile.level),
        goal=_describe(profile.goal),
    )
    common = _load_prompt("common_rules.txt").format(
        search_example=youtube_search_url("NOME DO EXERCICIO"),
    )
    rules = _load_prompt(_ROLE_RULES[role])
    return "\n\n".join([profile_block.strip(), rules.strip(), common.strip()])


def _to_history(messages: list[ChatMessage]) -> list[BaseMessage]:
    """Convert prior turns to LangChain messages.

    Empty turns are dropped, and the history starts at the first user
    turn so the canned greeting is never replayed to the model.
    """
    history: list[BaseMessage] = []
    for m in messages:
        if not m.text.strip():
            continue
        if m.role == "user":
            history.append(HumanMessage(content=m.text))
        elif history:
            history.append(AIMessage(content=m.text))
    return history


def _response_text(response: BaseMessage) -> str:
    """Flatten a model reply to plain text (content may be a list of blocks)."""
    content = response.content
    if isinstance(content, str):
        return content.strip()
    parts: list[str] = []
    for block in content:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type", "text") == "text":
            parts.append(str(block.get("text", "")))
    return "".join(parts).strip()


def _get(data: dict[str, Any], *names: str) -> Any:
    """Read the first present key among snake_case / camelCase spellings."""
    for name in names:
        if name in data:
            return data[name]
    return None


def extract_grounding(response: BaseMessage) -> GroundingMetadata | None:
    """Parse web citations out of a model reply's response metadata.

    Returns:
        ``GroundingMetadata`` when the reply carries citations or search
        queries, else ``None``.
    """
    metadata = getattr(response, "response_metadata", None) or {}
    raw = _get(metadata, "grounding_metadata", "groundingMetadata")
    if not isinstance(raw, dict):
        return None

    sources: list[GroundingSource] = []
    for chunk in _get(raw, "grounding_chunks", "groundingChunks") or []:
        web = chunk.get("web") if isinstance(chunk, dict) else None
        if isinstance(web, dict) and web.get("uri"):
            sources.append(GroundingSource(uri=web["uri"], title=web.get("title") or ""))
    queries = [str(q) for q in _get(raw, "web_search_queries", "webSearchQueries") or []]

    if not sources and not queries:
        return None
    return GroundingMetadata(sources=sources, search_queries=queries)


def _with_search(llm: BaseChatModel, cfg: Settings) -> Any:
    """Bind the provider's web-search tool when it has one."""
    if cfg.web_search_enabled and cfg.llm_provider == "google":
        return llm.bind_tools([{"google_search": {}}])
    return llm


async def send_message_to_ai(
    message: str,
    history: list[ChatMessage],
    profile: UserProfile,
    role: AssistantType,
    language: str | None = None,
    settings: Settings | None = None,
) -> AIResponse:
    """Send one chat turn to the assistant for *role*.

    Args:
        message: The new user message.
        history: Prior turns of the conversation, oldest first.
        profile: Signed-in user; embedded in the system instruction.
        role: ``"trainer"`` or ``"nutritionist"``.
        language: Language code for the reply and fallback text.
        settings: Optional settings override.

    Returns:
        The assistant's reply, or a localized fallback text on any failure.
    """
    cfg = settings or default_settings
    lang = language or cfg.language
    try:
        system_prompt = build_system_instruction(role, profile) + llm_language_instruction(lang)
        messages: list[BaseMessage] = [
            SystemMessage(content=system_prompt),
            *_to_history(history),
            HumanMessage(content=message + _MESSAGE_SUFFIX),
        ]
        llm = _with_search(get_llm("chat", cfg), cfg)
        response = await llm.ainvoke(messages)
        return AIResponse(
            text=_response_text(response) or translate("errors.ai_empty_chat", lang),
            grounding_metadata=extract_grounding(response),
        )
    except Exception:
        logger.exception("AI chat call failed for role %s", role)
        return AIResponse(text=translate("errors.ai_chat", lang))


async def analyze_image(
    images: list[str],
    prompt: str,
    scan_type: ScanType,
    language: str | None = None,
    settings: Settings | None = None,
) -> AIResponse:
    """Ask the vision model for a structured report on one or two photos.

    Args:
        images: Base64-encoded JPEG payloads. Two for ``body`` (front,
            back), one for ``food``.
        prompt: Scan-specific instruction.
        scan_type: ``"body"`` or ``"food"``.
        language: Language code for the reply and fallback text.
        settings: Optional settings override.

    Returns:
        The analysis, or a localized fallback text on any failure.
    """
    cfg = settings or default_settings
    lang = language or cfg.language
    try:
        expected = REQUIRED_IMAGES[scan_type]
        if len(images) != expected:
            raise ValueError(
                f"{scan_type} scan needs {expected} image(s), got {len(images)}."
            )
        content: list[str | dict[str, Any]] = [
            {"type": "image_url", "image_url": {"url": f"data:image/jpeg;base64,{data}"}}
            for data in images
        ]
        content.append(
            {"type": "text", "text": prompt + _VISION_SUFFIX + llm_language_instruction(lang)}
        )
        llm = get_llm("vision", cfg)
        response = await llm.ainvoke([HumanMessage(content=content)])
        return AIResponse(text=_response_text(response) or translate("errors.ai_empty_vision", lang))
    except Exception:
        logger.exception("Vision call failed for %s scan", scan_type)
        return AIResponse(text=translate("errors.ai_vision", lang))
