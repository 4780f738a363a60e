"""Tests for encode, inspect and compare CLI commands"""

import json

from seqex_cli.main import cli


AD_TYPE_HEX = "121c0a1a0a0761645f74797065120f0a0d0a0b0a0953435f435043565f31"


class TestEncodeCommands:
    """Test suite for encoding commands"""

    def test_encode_json(self, cli_runner, temp_config_file):
        """Test encoding an inline feature map"""
        # Run command
        result = cli_runner.invoke(
            cli,
            [
                "--config", temp_config_file,
                "--output", "json",
                "encode", "--json", '{"ad_type": ["SC_CPCV_1"]}'
            ]
        )

        # Verify
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data == {"features": 1, "size": 30, "hex": AD_TYPE_HEX}

    def test_encode_example_to_file(self, cli_runner, temp_config_file, tmp_path):
        """Test writing the raw bytes of a canned example"""
        out_file = tmp_path / "example.bin"

        # Run command
        result = cli_runner.invoke(
            cli,
            [
                "--config", temp_config_file,
                "encode", "--example", "0", "--out", str(out_file)
            ]
        )

        # Verify
        assert result.exit_code == 0
        assert "Wrote" in result.output
        assert out_file.read_bytes()[0] == 0x12

    def test_encode_features_file(self, cli_runner, temp_config_file, tmp_path):
        """Test encoding a YAML feature file"""
        features_file = tmp_path / "features.yaml"
        features_file.write_text("ad_type:\n  - SC_CPCV_1\n")

        # Run command
        result = cli_runner.invoke(
            cli,
            [
                "--config", temp_config_file,
                "--output", "json",
                "encode", "--features-file", str(features_file)
            ]
        )

        # Verify
        assert result.exit_code == 0
        assert json.loads(result.stdout)["hex"] == AD_TYPE_HEX

    def test_encode_unsupported_value(self, cli_runner, temp_config_file):
        """Test encoding a feature map with an unsupported value"""
        # Run command
        result = cli_runner.invoke(
            cli,
            [
                "--config", temp_config_file,
                "encode", "--json", '{"bad": [{}]}'
            ]
        )

        # Verify
        assert result.exit_code == 1
        assert "Failed to encode features" in result.output
        assert 'key "bad"' in result.output

    def test_encode_requires_one_source(self, cli_runner, temp_config_file):
        """Test that encode needs exactly one feature source"""
        # Run command
        result = cli_runner.invoke(
            cli,
            [
                "--config", temp_config_file,
                "encode", "--json", "{}", "--example", "1"
            ]
        )

        # Verify
        assert result.exit_code == 1
        assert "exactly one" in result.output

    def test_encode_invalid_example(self, cli_runner, temp_config_file):
        """Test encoding an example index out of range"""
        # Run command
        result = cli_runner.invoke(
            cli,
            ["--config", temp_config_file, "encode", "--example", "42"]
        )

        # Verify
        assert result.exit_code == 1
        assert "Valid range: 0-9" in result.output

    def test_inspect(self, cli_runner, temp_config_file):
        """Test decoding a hex payload"""
        # Run command
        result = cli_runner.invoke(
            cli,
            ["--config", temp_config_file, "--output", "json", "inspect", AD_TYPE_HEX]
        )

        # Verify
        assert result.exit_code == 0
        assert json.loads(result.stdout) == [
            {"feature": "ad_type", "kind": "BYTES", "values": ["SC_CPCV_1"]}
        ]

    def test_inspect_text(self, cli_runner, temp_config_file):
        """Test printing the text format of a payload"""
        # Run command
        result = cli_runner.invoke(
            cli,
            ["--config", temp_config_file, "inspect", "--text", AD_TYPE_HEX]
        )

        # Verify
        assert result.exit_code == 0
        assert "feature_lists" in result.output

    def test_inspect_invalid_hex(self, cli_runner, temp_config_file):
        """Test decoding a string that is not hex"""
        # Run command
        result = cli_runner.invoke(
            cli,
            ["--config", temp_config_file, "inspect", "not-hex"]
        )

        # Verify
        assert result.exit_code == 1
        assert "Not a hex string" in result.output

    def test_compare_equivalent(self, cli_runner, temp_config_file):
        """Test comparing two identical payloads"""
        # Run command
        result = cli_runner.invoke(
            cli,
            [
                "--config", temp_config_file,
                "--output", "json",
                "compare", AD_TYPE_HEX, AD_TYPE_HEX
            ]
        )

        # Verify
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["equivalent"] is True
        assert data["identical_bytes"] is True

    def test_compare_different(self, cli_runner, temp_config_file):
        """Test comparing two different payloads"""
        # Run command
        result = cli_runner.invoke(
            cli,
            ["--config", temp_config_file, "compare", AD_TYPE_HEX, "1200"]
        )

        # Verify
        assert result.exit_code == 1
