"""
Serialise a key-ordered node tree to XML text.

The tree uses a small set of conventions:

* ``_declaration`` at document level holds the XML declaration attributes;
* ``_attributes`` maps attribute names to values (``None`` is skipped);
* ``_text`` and ``_cdata`` hold character data, the latter written as a
  CDATA section;
* ``_comment`` holds a comment (or a list of them);
* any other key is a child element, a list value being a run of repeated
  siblings and a scalar value a text-only child.

Prefixed names such as ``atom:link`` are resolved against the ``xmlns:*``
attributes of the element itself and its ancestors. A prefix declared
nowhere in the tree is declared on the root element, with its well known URI
when there is one.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Dict, Set

from lxml import etree

from rssgen.config import KNOWN_NAMESPACES
from rssgen.errors import XmlEncodingError

log = logging.getLogger(__name__)

XML_NAMESPACE = "http://www.w3.org/XML/1998/namespace"
UNKNOWN_NAMESPACE = "urn:rssgen:undeclared:{prefix}"


def encode(
    document: Mapping,
    pretty: bool = True,
    indent: int = 4,
    ignore_comments: bool = True,
) -> str:
    roots = [(name, node) for name, node in document.items() if not name.startswith("_")]
    if len(roots) != 1:
        raise XmlEncodingError(f"Expected exactly one root element, got {len(roots)}")
    root_name, root_node = roots[0]

    nsmap = _local_namespaces(root_node)
    missing: Set[str] = set()
    _collect_undeclared(root_name, root_node, {}, missing)
    for prefix in sorted(missing):
        uri = KNOWN_NAMESPACES.get(prefix)
        if uri is None:
            uri = UNKNOWN_NAMESPACE.format(prefix=prefix)
            log.warning("Namespace prefix %r is not declared anywhere, using %s", prefix, uri)
        nsmap[prefix] = uri

    root = etree.Element(_qname(root_name, nsmap), nsmap=nsmap)
    _fill(root, root_node, nsmap, ignore_comments)

    if pretty:
        etree.indent(root, space=" " * indent)
    body = etree.tostring(root, encoding="unicode")

    declaration = _declaration(document.get("_declaration"))
    separator = "\n" if pretty else ""
    return f"{declaration}{separator}{body}" if declaration else body


def _declaration(node: Any) -> str:
    if node is None:
        return ""
    attributes = node.get("_attributes") or {}
    parts = "".join(f' {name}="{value}"' for name, value in attributes.items())
    return f"<?xml{parts}?>"


def _local_namespaces(node: Any) -> Dict[str, str]:
    """``xmlns:*`` declarations carried by the node's own attributes."""
    if not isinstance(node, Mapping):
        return {}
    attributes = node.get("_attributes") or {}
    return {
        name.split(":", 1)[1]: str(value)
        for name, value in attributes.items()
        if name.startswith("xmlns:") and value is not None
    }


def _prefix(name: str) -> str | None:
    if ":" not in name:
        return None
    prefix = name.split(":", 1)[0]
    if prefix in ("xml", "xmlns"):
        return None
    return prefix


def _collect_undeclared(name: str, node: Any, scope: Dict[str, str], missing: Set[str]) -> None:
    scope = {**scope, **_local_namespaces(node)}
    names = [name]
    if isinstance(node, Mapping):
        names.extend((node.get("_attributes") or {}).keys())
    for candidate in names:
        prefix = _prefix(candidate)
        if prefix is not None and prefix not in scope:
            missing.add(prefix)

    if not isinstance(node, Mapping):
        return
    for key, value in node.items():
        if key.startswith("_") or value is None:
            continue
        for child in value if isinstance(value, list) else [value]:
            if child is not None:
                _collect_undeclared(key, child, scope, missing)


def _qname(name: str, scope: Dict[str, str]) -> str:
    if ":" not in name:
        return name
    prefix, local = name.split(":", 1)
    if prefix == "xml":
        return f"{{{XML_NAMESPACE}}}{local}"
    if prefix not in scope:
        raise XmlEncodingError(f"Namespace prefix {prefix!r} of {name!r} is not declared")
    return f"{{{scope[prefix]}}}{local}"


def _to_text(value: Any) -> str:
    if isinstance(value, bool):
        return str(value).lower()
    return str(value)


def _append_text(element: etree._Element, text: str) -> None:
    if len(element):
        last = element[-1]
        last.tail = (last.tail or "") + text
    else:
        element.text = (element.text or "") + text


def _fill(
    element: etree._Element,
    node: Any,
    scope: Dict[str, str],
    ignore_comments: bool,
) -> None:
    if node is None:
        return
    if not isinstance(node, Mapping):
        _append_text(element, _to_text(node))
        return

    for key, value in node.items():
        if value is None:
            continue
        try:
            if key == "_attributes":
                for name, attr_value in value.items():
                    if attr_value is None or name == "xmlns" or name.startswith("xmlns:"):
                        continue
                    element.set(_qname(name, scope), _to_text(attr_value))
            elif key == "_text":
                _append_text(element, _to_text(value))
            elif key == "_cdata":
                text = _to_text(value)
                # a CDATA section cannot contain its own terminator
                if "]]>" in text or len(element):
                    _append_text(element, text)
                else:
                    element.text = etree.CDATA(text)
            elif key == "_comment":
                if ignore_comments:
                    continue
                comments = value if isinstance(value, list) else [value]
                for comment in comments:
                    element.append(etree.Comment(_to_text(comment)))
            elif key.startswith("_"):
                raise XmlEncodingError(f"Unsupported directive {key!r} in <{element.tag}>")
            else:
                children = value if isinstance(value, list) else [value]
                for child_node in children:
                    if child_node is None:
                        continue
                    local = _local_namespaces(child_node)
                    child_scope = {**scope, **local}
                    child = etree.SubElement(element, _qname(key, child_scope), nsmap=local or None)
                    _fill(child, child_node, child_scope, ignore_comments)
        except ValueError as exc:
            raise XmlEncodingError(f"Cannot encode {key!r}: {exc}") from exc
