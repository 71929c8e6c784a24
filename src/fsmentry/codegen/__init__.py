"""Rust code generation and diagram rendering."""
