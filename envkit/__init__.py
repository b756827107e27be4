"""
envkit - declarative build-environment resolver.

Turns a toolchain descriptor and a list of store package names into the
environment variables and shell hook needed to build a native application
with bindgen-generated bindings.
"""

__version__ = "0.1.0"
