"""coachrank - coach marketplace ranking engine and tooling."""

__version__ = "0.3.0"
