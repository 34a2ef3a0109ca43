from __future__ import annotations

import logging

from finassist.services.analytics import Context
from finassist.services.intents import generate_response

logger = logging.getLogger(__name__)

APOLOGY_MESSAGE = (
    "I apologize, but I encountered an error processing your question. Please try rephrasing it."
)
INVALID_RESPONSE_MESSAGE = "I apologize, but I couldn't generate a proper response. Please try again."


def respond(message: str, context: Context) -> str:
    try:
        answer = generate_response(message, context)
    except Exception:
        logger.exception("Error generating response for message %r", message[:50])
        return APOLOGY_MESSAGE

    if not isinstance(answer, str) or not answer.strip():
        logger.error("Invalid response generated: %r", answer)
        return INVALID_RESPONSE_MESSAGE
    return answer
