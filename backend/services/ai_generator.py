"""
AI content generator.

Turns a natural-language request into editor nodes. The model is asked for a
JSON array of root nodes; its reply is parsed and checked by the kernel before
anything reaches a page.
"""

from __future__ import annotations

import logging
from typing import Any

from backend.config import settings
from backend.services.anthropic_client import AnthropicClient
from builder.kernel.validation import parse_generated_nodes

logger = logging.getLogger(__name__)

WEBSITE_BUILDER_SYSTEM_PROMPT = """\
You are an expert website builder assistant inside a visual drag-and-drop website editor. \
You generate structured JSON component trees that the editor can render.

CONTEXT: The editor stores pages as a JSON node tree. Each node has:
- id: unique string identifier
- type: one of "section", "container", "heading", "text", "button", "image", "spacer", \
"divider", "grid", "columns", "column", "navbar", "footer"
- props: component-specific properties
- styles: responsive styles with { base: {...}, md: {...}, sm: {...} } breakpoints
- children: array of child nodes

COMPONENT TYPES AND THEIR PROPS:
1. section - Full-width block with background. Props: {}. Styles: padding, backgroundColor, minHeight, display, flexDirection, alignItems
2. container - Width-constrained content wrapper. Props: {}. Styles: maxWidth, padding, display, flexDirection
3. heading - Heading h1-h6. Props: { text: string, level: 1-6 }. Styles: fontSize, fontWeight, color, textAlign, marginBottom
4. text - Paragraph. Props: { text: string }. Styles: fontSize, lineHeight, color, textAlign, marginBottom
5. button - Link styled as a button. Props: { text: string, href: string }. Styles: padding, backgroundColor, color, borderRadius, fontSize, fontWeight
6. image - Image. Props: { src: string, alt: string }. Styles: width, height, borderRadius, objectFit
7. spacer - Vertical space. Props: {}. Styles: height
8. divider - Horizontal rule. Props: {}. Styles: width, height, backgroundColor, margin
9. grid - CSS grid layout. Props: { columns: number }. Styles: display:grid, gridTemplateColumns, gap
10. columns - Multi-column layout. Props: { columns: number }. Styles: display:grid, gridTemplateColumns, gap
11. column - One column inside columns/grid. Props: {}. Styles: padding, display, flexDirection
12. navbar - Navigation bar. Props: { logoText: string, navLinks: [{label, href}] }. Styles: display:flex, justifyContent, padding, backgroundColor
13. footer - Page footer. Props: { copyrightText: string, footerLinks: [{label, href}] }. Styles: padding, backgroundColor, color, textAlign

RULES:
1. Always output valid JSON matching the schema exactly
2. Give every node a unique id (for example "node-" followed by random alphanumerics)
3. Only section, container, grid, columns, column, navbar and footer may have children
4. Use responsive styles: base for desktop, md for tablet, sm for mobile
5. Write CSS values as strings ("16px", "#2563eb", "1.6", "center")
6. Use a proper heading hierarchy and accessible content
7. For images, use https://placehold.co/WIDTHxHEIGHT placeholder URLs
8. Return ONLY the JSON array of root nodes: no markdown, no explanation

When the user describes what they want, generate the complete node tree. \
If they want to modify existing content, output only the modified nodes with their original ids preserved."""

_CONTEXT_ACK = "I understand the current page structure. What would you like me to create or modify?"


def build_messages(prompt: str, context: str | None = None) -> list[dict[str, Any]]:
    """
    Conversation sent to the model: an optional page-context exchange,
    then the user's request.
    """
    messages: list[dict[str, Any]] = []
    if context:
        messages.append({"role": "user", "content": f"Current page structure context:\n{context}"})
        messages.append({"role": "assistant", "content": _CONTEXT_ACK})
    messages.append({"role": "user", "content": prompt})
    return messages


class AIGenerator:
    """Generates editor nodes from a prompt."""

    def __init__(self, client: AnthropicClient, model: str | None = None, max_tokens: int | None = None):
        self.client = client
        self.model = model or settings.AI_MODEL
        self.max_tokens = max_tokens or settings.AI_MAX_TOKENS
        self.last_usage: dict[str, int] | None = None

    async def generate(self, prompt: str, context: str | None = None) -> list[dict[str, Any]]:
        """
        Ask the model for nodes.

        Returns:
            Parsed, structurally valid nodes

        Raises:
            GeneratedContentError: the reply is not a valid node array
            anthropic.APIError: the request itself failed
        """
        raw = await self.client.complete(
            messages=build_messages(prompt, context),
            system=WEBSITE_BUILDER_SYSTEM_PROMPT,
            model=self.model,
            max_tokens=self.max_tokens,
            temperature=0.7,
        )
        self.last_usage = await self.client.get_usage_stats()

        if not raw.strip():
            raw = "[]"
        nodes = parse_generated_nodes(raw)
        logger.info("AI generated %d root node(s) for a %d-char prompt", len(nodes), len(prompt))
        return nodes


_generator: AIGenerator | None = None


def get_ai_generator() -> AIGenerator:
    """FastAPI dependency: the process-wide generator, created on first use."""
    global _generator
    if _generator is None:
        _generator = AIGenerator(AnthropicClient(api_key=settings.ANTHROPIC_API_KEY))
    return _generator
