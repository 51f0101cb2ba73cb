"""
astgen: Abstract syntax trees as JSON.

Parses source files with tree-sitter grammars and emits one compact JSON
document per file.
"""

__version__ = "0.8.0"
