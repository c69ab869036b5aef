"""Markup writer.

Walks a node tree and produces deterministic markup. The writer holds no
per-render state; everything it needs comes from its ``WriterConfig`` and
the nodes themselves.
"""

import json
import time
import uuid
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from lxml import etree

from markup_tree.shared import (
    AttributeParseError,
    AttributeTypeError,
    DiagnosticSeverity,
    InvalidTagError,
    Language,
    MarkupConfig,
    RenderResult,
    WriterConfig,
    get_logger,
)
from markup_tree.tree.attribute import (
    AttributeValue,
    ValueKind,
    classify_values,
    scalar_to_text,
)
from markup_tree.writer.escaping import escape_attribute

MS_PER_SECOND = 1000


class Writer:
    """Renders nodes to markup according to a ``WriterConfig``.

    ``render`` raises on failure. ``render_safe`` and ``to_string`` are the
    string-conversion boundary: an error anywhere in the walk is caught once,
    recorded as a diagnostic and replaced with an empty string. Children are
    always rendered through that boundary, so one failing child only blanks
    itself.
    """

    def __init__(
        self,
        config: Optional[WriterConfig] = None,
        *,
        language: Optional[Union[Language, str]] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        """Initialize writer.

        Args:
            config: Writer configuration, defaults to HTML5 output
            language: Shortcut overriding ``config.language``
            correlation_id: Attached to diagnostics and log records
        """
        config = config or WriterConfig()
        if language is not None:
            config = config.override(language=language)

        self.config = config
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "writer")

    @classmethod
    def from_config(
        cls,
        config: MarkupConfig,
        correlation_id: Optional[str] = None,
    ) -> "Writer":
        """Create a writer from a complete configuration.

        With correlation tracking enabled every writer gets an ID, generated
        when none is given. With it disabled the ID is dropped.
        """
        if config.global_.enable_correlation_tracking:
            correlation_id = correlation_id or str(uuid.uuid4())[:8]
        else:
            correlation_id = None

        return cls(config.writer, correlation_id=correlation_id)

    @property
    def language(self) -> Language:
        return self.config.language

    # ------------------------------------------------------------------
    # Tree rendering
    # ------------------------------------------------------------------

    def render(self, node: Any) -> str:
        """Render a node tree, letting errors from the node itself propagate."""
        return self._render(node, RenderResult(correlation_id=self.correlation_id))

    def render_safe(self, node: Any) -> RenderResult:
        """Render a node tree without raising.

        Returns:
            RenderResult with the markup, or "" and an error diagnostic
        """
        start_time = time.time()
        result = RenderResult(correlation_id=self.correlation_id)

        try:
            result.markup = self._render(node, result)
        except Exception as e:
            result.markup = ""
            self._report_failure(node, e, result)

        result.metrics.processing_time_ms = (time.time() - start_time) * MS_PER_SECOND
        result.metrics.characters_emitted = len(result.markup)
        return result

    def to_string(self, node: Any) -> str:
        """Render a node tree, returning "" instead of raising."""
        return self.render_safe(node).markup

    def render_child(self, child: Any, result: Optional[RenderResult] = None) -> str:
        """Render one child at its own string-conversion boundary.

        Diagnostics are recorded into ``result`` when one is given.
        """
        if result is None:
            return self.to_string(child)

        try:
            return self._render(child, result)
        except Exception as e:
            self._report_failure(child, e, result)
            return ""

    def _render(self, node: Any, result: RenderResult) -> str:
        node.prepare()

        parts: List[str] = []

        before = node.get_before_element()
        if before:
            parts.append(self.fragments_to_string(before))

        tag = node.tag
        attributes = node.get_attributes()
        if self.is_self_closing(tag):
            content = ""
        else:
            content = node.get_html_content(self, result)
        parts.append(self.tag(tag, attributes, content))

        after = node.get_after_element()
        if after:
            parts.append(self.fragments_to_string(after))

        result.metrics.elements_rendered += 1
        result.metrics.attributes_rendered += len(attributes)
        return "".join(parts)

    def _report_failure(self, node: Any, error: Exception, result: RenderResult) -> None:
        tag = getattr(node, "tag", None)
        details = {"tag": tag, "exception": type(error).__name__}
        result.add_diagnostic(
            DiagnosticSeverity.ERROR,
            f"Render failed: {error}",
            "writer",
            details=details,
        )

        if self.config.report_render_failures:
            self.logger.warning(
                f"Render of <{tag}> failed, substituting empty output: {error}",
                extra=details,
            )

    # ------------------------------------------------------------------
    # Tag building
    # ------------------------------------------------------------------

    def tag(
        self,
        tag: str,
        attributes: Optional[Union[Mapping[str, Any], str]] = None,
        content: str = "",
    ) -> str:
        """Generate a single tag string.

        Raises:
            InvalidTagError: If the tag is empty
        """
        if not tag:
            raise InvalidTagError("Empty HTML tag.")

        html = f"<{tag}"

        if attributes:
            html += self.build_attribute_string(attributes)

        if self.is_self_closing(tag):
            html += ">" if self.language is Language.HTML5 else " />"
        else:
            html += f">{content}</{tag}>"

        return html

    def is_self_closing(self, tag: str) -> bool:
        """Check if a tag is "self-closing"."""
        return self.config.is_self_closing(tag)

    # ------------------------------------------------------------------
    # Attributes
    # ------------------------------------------------------------------

    def escape_attribute(self, text: str) -> str:
        """Escape a string for use as an attribute value."""
        return escape_attribute(text, self.language)

    def attribute_text(self, name: str, value: Any) -> str:
        """Resolve an attribute value to unescaped text.

        Args:
            name: Attribute name, used when there are no values
            value: AttributeValue, list of values, mapping or single value

        Returns:
            Space-joined scalars, JSON for structured values, or ``name``
            when the value list is empty
        """
        if isinstance(value, Mapping):
            return self._encode_structured(value)

        if isinstance(value, AttributeValue):
            values = value.values
        elif isinstance(value, (list, tuple)):
            values = list(value)
        elif value is None:
            values = []
        else:
            values = [value]

        kind = classify_values(values)
        if kind is ValueKind.EMPTY:
            return name
        if kind is ValueKind.STRUCTURED:
            return self._encode_structured(values)
        return " ".join(scalar_to_text(item) for item in values)

    def _encode_structured(self, value: Any) -> str:
        return json.dumps(value, separators=self.config.structured_separators)

    def build_attribute_string(self, attributes: Union[Mapping[str, Any], str]) -> str:
        """Build an attribute string from a mapping or a raw attribute string.

        Attributes are emitted in their stored order, each preceded by a space.

        Raises:
            AttributeTypeError: If attributes is neither a mapping nor a string
            AttributeParseError: If a raw attribute string is malformed
        """
        if isinstance(attributes, str):
            attributes = self.parse_attribute_string(attributes)
        elif not isinstance(attributes, Mapping):
            raise AttributeTypeError(attributes)

        parts = []
        for name, value in attributes.items():
            text = self.attribute_text(name, value)
            parts.append(f' {name}="{self.escape_attribute(text)}"')

        return "".join(parts)

    def parse_attribute_string(self, text: str) -> Dict[str, str]:
        """Parse a raw attribute string such as ``class="a b" id="x"``.

        Strings that do not start with ``<`` are wrapped in the configured
        host tag first. A complete tag is parsed as given.

        Raises:
            AttributeParseError: If the fragment is not well-formed
        """
        source = text.strip()
        if not source:
            return {}

        if not source.startswith("<"):
            host = self.config.parse_host_tag
            source = f"<{host} {source}></{host}>"

        parser = etree.XMLParser(resolve_entities=False, no_network=True)
        try:
            element = etree.fromstring(source, parser)
        except (etree.XMLSyntaxError, ValueError) as e:
            raise AttributeParseError(
                f"Malformed attribute string: {e}", source=text
            ) from e

        return {str(name): str(value) for name, value in element.attrib.items()}

    @staticmethod
    def fragments_to_string(fragments: Iterable[Any]) -> str:
        """Cast and concatenate raw fragments."""
        return "".join(str(fragment) for fragment in fragments)


_DEFAULT_WRITER: Optional[Writer] = None


def default_writer() -> Writer:
    """Return the shared HTML5 writer used by ``str(node)``."""
    global _DEFAULT_WRITER
    if _DEFAULT_WRITER is None:
        _DEFAULT_WRITER = Writer()
    return _DEFAULT_WRITER
