"""Proto3 text rendering for generated schemas."""

from jinja2 import Environment, PackageLoader

from .schema import MessageField, Schema

env = Environment(
    loader=PackageLoader("remoteproto.generator", "templates"),
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=True,
    line_comment_prefix="%%",
    line_statement_prefix="%",
)

template = env.get_template("proto.proto.j2")


def _field_line(field: MessageField) -> str:
    """Render a `type name = number;` line, with its trailing comment."""
    label = "repeated " if field.repeated else ""
    line = f"{label}{field.type} {field.name} = {field.number};"
    if field.comment:
        line += f" // {field.comment}"
    return line


def render(schema: Schema) -> str:
    """Render a schema to proto3 source text."""
    return template.render(schema=schema, field_line=_field_line)
