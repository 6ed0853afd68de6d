"""Operator identity"""
from pms.security.operator import get_current_operator, OPERATOR_HEADER

__all__ = ["get_current_operator", "OPERATOR_HEADER"]
