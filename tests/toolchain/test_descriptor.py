"""Unit tests for the toolchain descriptor reader."""

import pytest
from unittest.mock import patch

from envkit.core.exceptions import MissingFieldError, ParseError
from envkit.toolchain.descriptor import DescriptorReader, ToolchainDescriptor, read


@pytest.mark.unit
def test_read_channel(tmp_path):
    """Test reading the channel from rust-toolchain.toml."""
    # Arrange
    path = tmp_path / "rust-toolchain.toml"
    path.write_text('[toolchain]\nchannel = "nightly-2024-01-01"\n')

    # Act
    descriptor = read(path)

    # Assert
    assert descriptor.channel == "nightly-2024-01-01"
    assert descriptor.components == ()
    assert descriptor.targets == ()
    assert descriptor.profile is None
    assert descriptor.path == path


@pytest.mark.unit
def test_read_complete_descriptor(tmp_path):
    """Test reading all optional rustup fields."""
    path = tmp_path / "rust-toolchain.toml"
    path.write_text(
        """
[toolchain]
channel = "1.79.0"
components = ["rustfmt", "clippy"]
targets = ["wasm32-unknown-unknown"]
profile = "minimal"
"""
    )

    descriptor = read(path)

    assert descriptor == ToolchainDescriptor(
        channel="1.79.0",
        components=("rustfmt", "clippy"),
        targets=("wasm32-unknown-unknown",),
        profile="minimal",
    )


@pytest.mark.unit
def test_read_legacy_file(tmp_path):
    """Test reading a legacy single-line rust-toolchain file."""
    path = tmp_path / "rust-toolchain"
    path.write_text("stable\n")

    assert read(path).channel == "stable"


@pytest.mark.unit
def test_toml_without_extension(tmp_path):
    """Test a TOML document in a file without .toml extension."""
    path = tmp_path / "rust-toolchain"
    path.write_text('[toolchain]\nchannel = "beta"\n')

    assert read(path).channel == "beta"


@pytest.mark.unit
def test_missing_channel(tmp_path):
    """Test a toolchain table without channel raises MissingFieldError."""
    path = tmp_path / "rust-toolchain.toml"
    path.write_text('[toolchain]\ncomponents = ["rustfmt"]\n')

    with pytest.raises(MissingFieldError, match="toolchain.channel"):
        read(path)


@pytest.mark.unit
def test_missing_toolchain_table(tmp_path):
    """Test a document without [toolchain] raises MissingFieldError."""
    path = tmp_path / "rust-toolchain.toml"
    path.write_text('[other]\nchannel = "stable"\n')

    with pytest.raises(MissingFieldError):
        read(path)


@pytest.mark.unit
def test_malformed_toml(tmp_path):
    """Test invalid TOML raises ParseError."""
    path = tmp_path / "rust-toolchain.toml"
    path.write_text('[toolchain\nchannel = "stable"\n')

    with pytest.raises(ParseError):
        read(path)


@pytest.mark.unit
@pytest.mark.parametrize(
    "content",
    [
        'toolchain = "stable"\n',
        "[toolchain]\nchannel = 42\n",
        '[toolchain]\nchannel = ""\n',
        '[toolchain]\nchannel = "stable"\ncomponents = "rustfmt"\n',
        '[toolchain]\nchannel = "stable"\nprofile = 1\n',
    ],
)
def test_invalid_field_types(tmp_path, content):
    """Test wrongly typed fields raise ParseError."""
    path = tmp_path / "rust-toolchain.toml"
    path.write_text(content)

    with pytest.raises(ParseError):
        read(path)


@pytest.mark.unit
@pytest.mark.parametrize(
    "channel",
    [
        '"stable\\ntouch injected #"',
        '"stable beta"',
        '"stable\\t"',
        '" stable"',
        '"nightly\\u001b"',
    ],
)
def test_channel_with_whitespace_or_control_chars(tmp_path, channel):
    """Test channels that could break out of shell text raise ParseError."""
    path = tmp_path / "rust-toolchain.toml"
    path.write_text(f"[toolchain]\nchannel = {channel}\n")

    with pytest.raises(ParseError, match="whitespace or control characters"):
        read(path)


@pytest.mark.unit
def test_legacy_channel_with_whitespace(tmp_path):
    """Test a legacy file holding more than one word raises ParseError."""
    path = tmp_path / "rust-toolchain"
    path.write_text("stable beta\n")

    with pytest.raises(ParseError, match="whitespace or control characters"):
        read(path)


@pytest.mark.unit
def test_channel_is_not_rewritten(tmp_path):
    """Test the TOML channel string is returned exactly as written."""
    path = tmp_path / "rust-toolchain.toml"
    path.write_text('[toolchain]\nchannel = "nightly-2024-01-01"\n')

    assert read(path).channel == "nightly-2024-01-01"


@pytest.mark.unit
def test_missing_file(tmp_path):
    """Test an unreadable file raises ParseError."""
    with pytest.raises(ParseError, match="cannot read file"):
        read(tmp_path / "rust-toolchain.toml")


@pytest.mark.unit
def test_missing_field_is_descriptor_error(tmp_path):
    """Both descriptor errors share the DescriptorError base."""
    from envkit.core.exceptions import DescriptorError, EnvKitError

    path = tmp_path / "rust-toolchain.toml"
    path.write_text("[toolchain]\n")

    with pytest.raises(DescriptorError) as exc_info:
        read(path)
    assert isinstance(exc_info.value, EnvKitError)


class TestDescriptorReader:
    """Test the read-once wrapper."""

    def test_reads_file_once(self, rust_toolchain_file):
        reader = DescriptorReader(rust_toolchain_file)

        with patch(
            "envkit.toolchain.descriptor.read", wraps=read
        ) as wrapped:
            first = reader.get()
            second = reader.get()

        assert first is second
        assert wrapped.call_count == 1

    def test_failure_is_not_cached(self, tmp_path):
        path = tmp_path / "rust-toolchain.toml"
        reader = DescriptorReader(path)

        with pytest.raises(ParseError):
            reader.get()

        path.write_text('[toolchain]\nchannel = "stable"\n')
        assert reader.get().channel == "stable"
