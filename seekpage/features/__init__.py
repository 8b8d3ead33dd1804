"""Entity modules built on the pagination engine."""
