from __future__ import annotations
import logging
import re
from typing import Optional
from geometry import parse_number

logger = logging.getLogger(__name__)

xml_pattern = re.compile(r'(\<[^>]*?\>)', flags=re.DOTALL | re.MULTILINE)
comment_pattern = re.compile(r'\<!--.*?--\>', flags=re.DOTALL | re.MULTILINE)
first_word_pattern = re.compile(r'^\s*[/!?]*\s*([\w:.-]+)')

class SVGParseError(ValueError):
    pass

def is_self_terminating(svg_value: str) -> bool:
    return svg_value.rstrip().endswith('/>')

def is_terminator(svg_value: str) -> bool:
    return svg_value.strip().startswith('</')

def is_declaration(svg_value: str) -> bool:
    content = svg_value.strip()
    return content.startswith('<?') or content.startswith('<!')

def get_tag(svg_value: str) -> str:
    content = svg_value.strip()
    if content.startswith('</'):
        content = content[2:]
    elif content.startswith('<'):
        content = content[1:]
    if content.endswith('>'):
        content = content[:-1]
    if content.endswith('/'):
        content = content[:-1]

    match = first_word_pattern.search(content)
    if match:
        return match.group(1)
    return ""

def parse_attributes(element: str) -> dict[str, str]:
    attributes = {}

    content = element.strip()
    if content.startswith('</'):
        return attributes
    if content.startswith('<'):
        content = content[1:]
    if content.endswith('>'):
        content = content[:-1]
    if content.endswith('/'):
        content = content[:-1].rstrip()

    parts = content.split(None, 1)
    if len(parts) < 2:
        return attributes

    attr_string = parts[1]

    # 0: key, 1: waiting for quote, 2: value, 3: escaped char
    state = 0
    quote = ''
    accumulator = ""
    current_key = ""

    for char in attr_string:
        if state == 0:
            if char == '=':
                current_key = accumulator.strip()
                accumulator = ""
                state = 1
            elif not char.isspace():
                accumulator += char
        elif state == 1:
            if char == '"' or char == "'":
                quote = char
                state = 2
            elif not char.isspace():
                raise SVGParseError(f"Unquoted value for '{current_key}' in {element.strip()[:40]}")
        elif state == 2:
            if char == '\\':
                state = 3
            elif char == quote:
                attributes[current_key] = accumulator
                accumulator = ""
                current_key = ""
                state = 0
            else:
                accumulator += char
        elif state == 3:
            accumulator += char
            state = 2

    if state == 2:
        raise SVGParseError(f"Unterminated attribute value for '{current_key}' in {element.strip()[:40]}")

    return attributes

def tokenize(data: str) -> list[str]:
    data = comment_pattern.sub('', data)
    return xml_pattern.findall(data)

class Node:
    """One element of the markup tree, read through the attribute-source interface."""

    def __init__(self, element: str):
        self.element = element
        self.tag = get_tag(element)
        self.attributes = parse_attributes(element)
        self.children: list[Node] = []

    def add_child(self, new_node: 'Node') -> 'Node':
        self.children.append(new_node)
        return new_node

    def compare_tag(self, element: str) -> bool:
        return self.tag == get_tag(element)

    def get_tag_name(self) -> str:
        return self.tag

    def has_attribute(self, name: str) -> bool:
        return name in self.attributes

    def get_string(self, name: str) -> Optional[str]:
        return self.attributes.get(name)

    def get_number(self, name: str) -> Optional[float]:
        return parse_number(self.attributes.get(name))

    def get_children(self) -> list['Node']:
        return list(self.children)

def parse_svg_text(data: str) -> Node:
    """Build the element tree for one SVG document.

    Raises SVGParseError for empty input, unbalanced tags or a root
    element other than <svg>.
    """
    if data is None or not data.strip():
        raise SVGParseError("Empty document")

    root = None
    stack: list[Node] = []

    for entry in tokenize(data):
        if is_declaration(entry):
            continue

        if is_terminator(entry):
            if not stack:
                raise SVGParseError(f"Unexpected closing tag {entry.strip()}")
            if not stack[-1].compare_tag(entry):
                raise SVGParseError(f"Mismatched closing tag {entry.strip()}, expected </{stack[-1].tag}>")
            stack.pop()
            continue

        node = Node(entry)
        if not node.tag:
            raise SVGParseError(f"Malformed tag {entry.strip()[:40]}")

        if stack:
            stack[-1].add_child(node)
        elif root is None:
            root = node
        else:
            raise SVGParseError(f"Content after the root element: <{node.tag}>")

        if not is_self_terminating(entry):
            stack.append(node)

    if root is None:
        raise SVGParseError("No root element found")
    if stack:
        raise SVGParseError(f"Unclosed element <{stack[-1].tag}>")
    if root.tag != 'svg':
        raise SVGParseError(f"Root element is not <svg>, found: <{root.tag}>")

    logger.debug("Parsed markup tree rooted at <%s> with %d children", root.tag, len(root.children))
    return root

def parse_svg_file(path: str) -> Node:
    with open(path, 'r', encoding='utf-8') as file:
        data = file.read()

    return parse_svg_text(data)
