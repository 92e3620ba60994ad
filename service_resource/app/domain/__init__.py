from .authorization_gate import AuthorizationGate

__all__ = ["AuthorizationGate"]
