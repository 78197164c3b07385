"""JSON serialization/deserialization for seqlang ASTs.

This module converts between AST dataclasses and plain Python dict/list
structures suitable for JSON encoding. Every node is tagged with its
class name under ``"type"``.
"""

from __future__ import annotations

from typing import Any, Dict

from .ast import (
    AnyNode,
    LiteralInt,
    SequenceInit,
    Variable,
    BinaryOp,
    Len,
    Print,
    Compound,
    If,
    While,
    Assignment,
    Push,
    Program,
)


def ast_to_obj(node: AnyNode) -> Any:
    if node is None:
        return None
    if isinstance(node, Program):
        return {"type": "Program", "body": [ast_to_obj(s) for s in node.body]}

    # Expressions
    if isinstance(node, LiteralInt):
        return {"type": "LiteralInt", "value": node.value}
    if isinstance(node, SequenceInit):
        return {"type": "SequenceInit", "elements": [ast_to_obj(e) for e in node.elements]}
    if isinstance(node, Variable):
        return {"type": "Variable", "name": node.name}
    if isinstance(node, BinaryOp):
        return {"type": "BinaryOp", "op": node.op, "left": ast_to_obj(node.left), "right": ast_to_obj(node.right)}
    if isinstance(node, Len):
        return {"type": "Len", "operand": ast_to_obj(node.operand)}

    # Statements
    if isinstance(node, Print):
        return {"type": "Print", "expr": ast_to_obj(node.expr)}
    if isinstance(node, Compound):
        return {"type": "Compound", "statements": [ast_to_obj(s) for s in node.statements]}
    if isinstance(node, (If, While)):
        return {
            "type": type(node).__name__,
            "condition": ast_to_obj(node.condition),
            "body": ast_to_obj(node.body),
        }
    if isinstance(node, Assignment):
        return {
            "type": "Assignment",
            "name": node.name,
            "index": ast_to_obj(node.index),
            "expr": ast_to_obj(node.expr),
        }
    if isinstance(node, Push):
        return {"type": "Push", "sequence": ast_to_obj(node.sequence), "value": ast_to_obj(node.value)}

    raise TypeError(f"Unsupported node for serialization: {type(node).__name__}")


def ast_from_obj(obj: Dict[str, Any]) -> Any:
    if obj is None:
        return None
    if not isinstance(obj, dict):
        raise TypeError("Invalid AST object")
    t = obj.get("type")
    if t == "Program":
        return Program(body=[ast_from_obj(s) for s in obj["body"]])
    if t == "LiteralInt":
        return LiteralInt(value=int(obj["value"]))
    if t == "SequenceInit":
        return SequenceInit(elements=[ast_from_obj(e) for e in obj["elements"]])
    if t == "Variable":
        return Variable(name=obj["name"])
    if t == "BinaryOp":
        return BinaryOp(op=obj["op"], left=ast_from_obj(obj["left"]), right=ast_from_obj(obj["right"]))
    if t == "Len":
        return Len(operand=ast_from_obj(obj["operand"]))
    if t == "Print":
        return Print(expr=ast_from_obj(obj["expr"]))
    if t == "Compound":
        return Compound(statements=[ast_from_obj(s) for s in obj["statements"]])
    if t == "If":
        return If(condition=ast_from_obj(obj["condition"]), body=ast_from_obj(obj["body"]))
    if t == "While":
        return While(condition=ast_from_obj(obj["condition"]), body=ast_from_obj(obj["body"]))
    if t == "Assignment":
        return Assignment(name=obj["name"], index=ast_from_obj(obj.get("index")), expr=ast_from_obj(obj["expr"]))
    if t == "Push":
        return Push(sequence=ast_from_obj(obj["sequence"]), value=ast_from_obj(obj["value"]))

    raise ValueError(f"Unknown AST node type: {t}")
