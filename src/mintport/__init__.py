"""
mintport: Docusaurus to Mintlify migration and documentation maintenance tools.
"""

__version__ = "0.1.0"
