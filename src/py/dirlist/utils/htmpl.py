from typing import Callable, Iterator, Union, cast

from mypy_extensions import KwArg, VarArg

# --
# HTMPL builds HTML documents as trees of nodes that are serialized on
# demand. Text is always escaped, `raw()` injects pre-rendered markup as is.

HTML_VOID: frozenset[str] = frozenset(
	"area base br col embed hr img input link meta source track wbr".split()
)
HTML_ESCAPED = str.maketrans(
	{"&": "&amp;", "<": "&lt;", ">": "&gt;", '"': "&quot;", "'": "&#x27;"}
)
HTML_QUOTED = str.maketrans({"&": "&amp;", '"': "&quot;"})


def escape(text: str) -> str:
	return text.translate(HTML_ESCAPED)


class Raw:
	__slots__ = ["markup"]

	def __init__(self, markup: str):
		self.markup: str = markup

	def iterHTML(self) -> Iterator[str]:
		yield self.markup


TNodeContent = Union["Node", Raw, str, bool, float, int]
TAttributeContent = str | bool | float | int | None


class Node:
	__slots__ = ["name", "attributes", "children"]

	def __init__(
		self,
		name: str,
		children: list[TNodeContent],
		attributes: dict[str, TAttributeContent],
	):
		self.name: str = name
		self.children: list[TNodeContent] = children
		self.attributes: dict[str, TAttributeContent] = attributes

	def iterHTML(self) -> Iterator[str]:
		yield f"<{self.name}"
		for k, v in self.attributes.items():
			# `None` gives a bare attribute, like `<input disabled>`
			yield f" {k}" if v is None else f' {k}="{str(v).translate(HTML_QUOTED)}"'
		yield ">"
		if self.name in HTML_VOID and not self.children:
			return
		for child in self.children:
			if isinstance(child, (Node, Raw)):
				yield from child.iterHTML()
			else:
				yield escape(str(child))
		yield f"</{self.name}>"

	def __str__(self) -> str:
		return "".join(self.iterHTML())


def raw(markup: str) -> Raw:
	return Raw(markup)


NodeFactory = Callable[
	[
		VarArg(TNodeContent | list[TNodeContent]),
		KwArg(TAttributeContent),
	],
	Node,
]


def element(name: str) -> NodeFactory:
	def f(*children: TNodeContent | list[TNodeContent], **attributes: TAttributeContent) -> Node:
		content: list[TNodeContent] = []
		for _ in children:
			if isinstance(_, (list, tuple)):
				content.extend(_)
			else:
				content.append(_)
		# `_` stands for `class`, which is a reserved word
		return Node(
			name,
			content,
			{("class" if k == "_" else k): v for k, v in attributes.items()},
		)

	f.__name__ = name
	return cast(NodeFactory, f)


class Markup:
	"""Gives `H.<tag>(*children, **attributes)` node factories for a fixed
	set of tags, so that typos fail early."""

	TAGS: frozenset[str] = frozenset(
		"a body div h1 h2 h3 head html meta p span style table td th title tr".split()
	)

	def __init__(self) -> None:
		self.factories: dict[str, NodeFactory] = {_: element(_) for _ in self.TAGS}

	def __getattr__(self, name: str) -> NodeFactory:
		try:
			return self.__dict__["factories"][name]
		except KeyError:
			raise AttributeError(f"No tag {name}, pick one of {','.join(sorted(self.TAGS))}") from None


H: Markup = Markup()


def html(*nodes: Node, doctype: str | None = None) -> Iterator[str]:
	if doctype:
		yield f"<!DOCTYPE {doctype}>\n"
	for _ in nodes:
		yield from _.iterHTML()


# EOF
