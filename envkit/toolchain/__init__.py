"""Toolchain descriptor handling for envkit."""

from envkit.toolchain.descriptor import (
    ToolchainDescriptor,
    DescriptorReader,
    read,
)

__all__ = ["ToolchainDescriptor", "DescriptorReader", "read"]
