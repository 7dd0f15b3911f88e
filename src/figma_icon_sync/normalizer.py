"""Normalize exported SVG markup and convert it into React components."""

import re
from typing import Any, Dict, List, Optional, Tuple, Union

from loguru import logger
from scour import scour

from figma_icon_sync.config import ComponentPolicy, ExportType, OptimizationPolicy
from figma_icon_sync.exceptions import ConfigError, MalformedContentError
from figma_icon_sync.models import OutputKind
from figma_icon_sync.naming import RuleTable, apply_rules, to_pascal_case

# svgo plugin name -> scour options it switches on
SVGO_PLUGIN_OPTIONS: Dict[str, List[Tuple[str, Any]]] = {
    "removeComments": [("strip_comments", True)],
    "removeMetadata": [("remove_metadata", True)],
    "removeTitle": [("remove_titles", True)],
    "removeDesc": [("remove_descriptions", True)],
    "removeXMLProcInst": [("strip_xml_prolog", True)],
    "cleanupIds": [("strip_ids", True), ("shorten_ids", True)],
    "cleanupIDs": [("strip_ids", True), ("shorten_ids", True)],
    "collapseGroups": [("group_collapse", True)],
    "convertColors": [("simple_colors", True)],
    "convertStyleToAttrs": [("style_to_xml", True)],
    "removeEditorsNSData": [("keep_editor_data", False)],
    "removeUselessDefs": [("keep_defs", False)],
    "removeXMLSpace": [("strip_xml_space_attribute", True)],
    "minify": [("indent_type", "none"), ("newlines", False)],
}

# scour turns these transforms on by default; only the plugin list may enable them
SCOUR_BASELINE: Dict[str, Any] = {
    "quiet": True,
    "simple_colors": False,
    "style_to_xml": False,
    "group_collapse": False,
    "group_create": False,
    "keep_editor_data": True,
    "keep_defs": True,
    "strip_xml_prolog": True,
}

SVG_ELEMENT = re.compile(r"<svg(\s[^>]*)?>([\s\S]*?)</svg>")
OPENING_TAG = re.compile(r"<([A-Za-z][\w:.-]*)(\s[^<>]*?)?(/?)>")
ATTRIBUTE = re.compile(r"([A-Za-z_][\w:.-]*)(\s*=)")

# React keeps these prefixes hyphenated
PASSTHROUGH_ATTRIBUTE_PREFIXES = ("aria-", "data-")

ATTRIBUTE_NAME_RULES: RuleTable = [
    (re.compile(r"^class$"), "className"),
    (re.compile(r"^for$"), "htmlFor"),
    (re.compile(r"[-:]([A-Za-z])"), lambda m: m.group(1).upper()),
]

PluginSpec = Union[str, Dict[str, Any]]


def _plugin_name(plugin: PluginSpec) -> Optional[str]:
    if isinstance(plugin, str):
        return plugin
    if plugin.get("active", True) is False or plugin.get("enabled", True) is False:
        return None
    return plugin.get("name")


def build_scour_options(plugins: List[PluginSpec]):
    """
    Translate svgo-style plugin settings into a scour options object.

    Only the transforms named by the plugins are switched on.

    Raises:
        ConfigError: If a plugin has invalid params
    """
    options = scour.sanitizeOptions()
    for option, value in SCOUR_BASELINE.items():
        setattr(options, option, value)

    for plugin in plugins:
        name = _plugin_name(plugin)
        if name is None:
            continue

        if name == "cleanupNumericValues":
            params = (plugin.get("params") if isinstance(plugin, dict) else None) or {}
            precision = params.get("floatPrecision", options.digits)
            try:
                options.digits = int(precision)
            except (TypeError, ValueError) as e:
                raise ConfigError(
                    f"cleanupNumericValues floatPrecision must be an integer, got {precision!r}"
                ) from e
            continue

        settings = SVGO_PLUGIN_OPTIONS.get(name)
        if settings is None:
            logger.warning(f"Ignoring unsupported svgo plugin: {name}")
            continue
        for option, value in settings:
            setattr(options, option, value)

    return options


def normalize_svg(
    raw: str, policy: Optional[OptimizationPolicy] = None, options: Any = None
) -> str:
    """
    Return SVG markup ready to be written.

    Content passes through untouched unless optimization is enabled, in which
    case it goes through scour's cleanup pass. Pass options from
    build_scour_options to reuse them across a batch.

    Raises:
        ConfigError: If the plugin settings are invalid
        MalformedContentError: If the optimizer cannot parse the markup
    """
    if policy is None or not policy.enabled:
        return raw

    if options is None:
        options = build_scour_options(policy.plugins)
    try:
        return scour.scourString(raw, options)
    except Exception as e:
        raise MalformedContentError(f"Could not optimize SVG: {e}") from e


def jsx_attribute_name(name: str) -> str:
    """stroke-width -> strokeWidth, class -> className, xlink:href -> xlinkHref"""
    if name.startswith(PASSTHROUGH_ATTRIBUTE_PREFIXES):
        return name
    return apply_rules(name, ATTRIBUTE_NAME_RULES)


def jsx_attributes(attributes: str) -> str:
    """Rename every attribute in an attribute string, leaving values untouched."""
    parts = re.split(r"(\"[^\"]*\"|'[^']*')", attributes)
    # Odd indexes are quoted values
    for index in range(0, len(parts), 2):
        parts[index] = ATTRIBUTE.sub(
            lambda m: jsx_attribute_name(m.group(1)) + m.group(2), parts[index]
        )
    return "".join(parts)


def jsx_markup(markup: str) -> str:
    """Rename attributes on every opening tag inside a block of markup."""

    def rewrite(match: re.Match) -> str:
        tag, attributes, closing = match.group(1), match.group(2) or "", match.group(3)
        return f"<{tag}{jsx_attributes(attributes)}{closing}>"

    return OPENING_TAG.sub(rewrite, markup)


def component_name(name: str, policy: Optional[ComponentPolicy] = None) -> str:
    policy = policy or ComponentPolicy()
    return f"{policy.component_prefix or ''}{to_pascal_case(name)}"


def svg_to_component(name: str, raw: str, policy: Optional[ComponentPolicy] = None) -> str:
    """
    Wrap SVG markup in a React function component.

    Props are spread onto the root <svg> after its own attributes so callers
    can override any of them.

    Raises:
        MalformedContentError: If no <svg>...</svg> element is found
    """
    policy = policy or ComponentPolicy()

    match = SVG_ELEMENT.search(raw)
    if not match:
        raise MalformedContentError("Invalid SVG content: no <svg> element found")

    attributes = jsx_attributes((match.group(1) or "").rstrip())
    content = jsx_markup(match.group(2).strip())

    export = "export default" if policy.export_type == ExportType.DEFAULT else "export"
    props_type = ": React.SVGProps<SVGSVGElement>" if policy.typescript else ""

    return (
        "import React from 'react';\n"
        "\n"
        f"{export} function {component_name(name, policy)}(props{props_type}) {{\n"
        "  return (\n"
        f"    <svg{attributes} {{...props}}>\n"
        f"      {content}\n"
        "    </svg>\n"
        "  );\n"
        "}\n"
    )


def render(
    base_name: str,
    svg: str,
    kind: OutputKind,
    component: Optional[ComponentPolicy] = None,
) -> str:
    """Produce file content for one output kind from already normalized SVG."""
    if kind == OutputKind.REACT:
        return svg_to_component(base_name, svg, component)
    return svg
