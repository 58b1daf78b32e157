from .fakes import FakeCompositor, FakeShield, FakeShieldFactory

__all__ = ["FakeCompositor", "FakeShield", "FakeShieldFactory"]
