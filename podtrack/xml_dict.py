"""Conversion between carrier XML documents and plain nested dicts.

xml_to_dict drops attributes and namespace prefixes, so a SOAP reply and
a bare XML reply decode to the same shape. Text-only elements become
strings, elements with children become dicts, and a tag repeated under one
parent becomes a list. Callers must cope with a one-item "list" coming back
as a bare value; see as_list.
"""

from xml.etree import ElementTree

ParseError = ElementTree.ParseError

def _local_name(tag):
    return tag.rsplit('}', 1)[-1].rsplit(':', 1)[-1]

def _element_to_value(element):
    children = list(element)
    if not children:
        return (element.text or '').strip()

    value = {}
    for child in children:
        name = _local_name(child.tag)
        child_value = _element_to_value(child)
        if name in value:
            if not isinstance(value[name], list):
                value[name] = [value[name]]
            value[name].append(child_value)
        else:
            value[name] = child_value
    return value

def xml_to_dict(raw):
    """Parse an XML string into {root_tag: value}, raises
    ElementTree.ParseError on malformed input
    """
    if isinstance(raw, str):
        raw = raw.encode('utf-8')
    root = ElementTree.fromstring(raw)
    return {_local_name(root.tag): _element_to_value(root)}

def _build(parent, name, value):
    if isinstance(value, (list, tuple)):
        for item in value:
            _build(parent, name, item)
        return

    element = ElementTree.SubElement(parent, name)
    if isinstance(value, dict):
        for key, child in value.items():
            _build(element, key, child)
    elif isinstance(value, bool):
        element.text = 'true' if value else 'false'
    elif value is not None:
        element.text = str(value)

def dict_to_xml(data, attrs=None):
    """Serialize a single-rooted dict into an XML document string, attrs are
    set on the root element
    """
    (name, value), = data.items()
    root = ElementTree.Element(name, attrs or {})
    if isinstance(value, dict):
        for key, child in value.items():
            _build(root, key, child)
    elif value is not None:
        root.text = str(value)
    return '<?xml version="1.0" encoding="UTF-8"?>' + \
        ElementTree.tostring(root, encoding='unicode')

def as_list(value):
    """Normalize a decoded node that may be missing, a single item or a
    list into a list
    """
    if value is None or value == '':
        return []
    if isinstance(value, list):
        return value
    return [value]

def find(node, *path):
    """Walk path through nested dicts (ints index into lists), returns None
    as soon as any step is missing instead of raising
    """
    for key in path:
        if isinstance(key, int):
            items = as_list(node) if not isinstance(node, str) else []
            try:
                node = items[key]
            except IndexError:
                return None
        elif isinstance(node, dict):
            node = node.get(key)
        else:
            return None
        if node is None:
            return None
    return node
