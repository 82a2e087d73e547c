"""Unit tests for the ilitools environment and request types."""

import re
from dataclasses import FrozenInstanceError
from pathlib import Path

import pytest

from ilicop.core.config import Settings
from ilicop.ilitools.environment import IlitoolsEnvironment
from ilicop.ilitools.types import PROCESS_FAILED_EXIT_CODE, ProcessResult, ValidationRequest


class TestInitializedFlags:
    def test_ilivalidator_needs_path(self):
        assert IlitoolsEnvironment(ilivalidator_path="/opt/ilivalidator.jar").is_ilivalidator_initialized
        assert not IlitoolsEnvironment(ilivalidator_path="  ").is_ilivalidator_initialized
        assert not IlitoolsEnvironment().is_ilivalidator_initialized

    def test_ili2gpkg_needs_path_and_feature_flag(self):
        assert IlitoolsEnvironment(
            ili2gpkg_path="/opt/ili2gpkg.jar", enable_gpkg_validation=True,
        ).is_ili2gpkg_initialized
        assert not IlitoolsEnvironment(
            ili2gpkg_path="/opt/ili2gpkg.jar", enable_gpkg_validation=False,
        ).is_ili2gpkg_initialized
        assert not IlitoolsEnvironment(enable_gpkg_validation=True).is_ili2gpkg_initialized

    def test_is_immutable(self):
        env = IlitoolsEnvironment()
        with pytest.raises(FrozenInstanceError):
            env.ilivalidator_path = "/opt/ilivalidator.jar"


class TestFromSettings:
    def test_maps_settings(self):
        settings = Settings(
            _env_file=None,
            ilivalidator_path="/opt/ilivalidator.jar",
            ili2gpkg_path="/opt/ili2gpkg.jar",
            enable_gpkg_validation=True,
            ilitools_model_repository_dir="/models",
            ilitools_trace_enabled=True,
            proxy="http://proxy:8080",
        )
        env = IlitoolsEnvironment.from_settings(settings)

        assert env.ilivalidator_path == "/opt/ilivalidator.jar"
        assert env.is_ili2gpkg_initialized is True
        assert env.model_repository_dir == "/models"
        assert env.trace_enabled is True
        assert env.proxy == "http://proxy:8080"
        assert env.java_executable == "java"

    def test_blank_paths_become_unset(self):
        settings = Settings(_env_file=None, ilivalidator_path="", proxy="  ")
        env = IlitoolsEnvironment.from_settings(settings)
        assert env.ilivalidator_path is None
        assert env.proxy is None


class TestSummary:
    def test_lists_versions_and_flags(self):
        env = IlitoolsEnvironment(
            ilivalidator_version="1.14.3",
            ilivalidator_path="/opt/ilivalidator.jar",
            enable_gpkg_validation=False,
        )
        text = str(env)

        assert re.search(r"ilivalidator version:\s+1\.14\.3\n", text)
        assert re.search(r"ilivalidator initialized:\s+yes\n", text)
        assert re.search(r"gpkg validation:\s+disabled\n", text)
        assert re.search(r"ili2gpkg version:\s+unset\n", text)


class TestValidationRequest:
    def test_for_transfer_file_derives_log_paths(self, tmp_path):
        request = ValidationRequest.for_transfer_file(tmp_path, "lines.xtf", ["catalogue.xml"])

        assert request.transfer_file_path == str(tmp_path / "lines.xtf")
        assert request.log_file_path == str(tmp_path / "lines_log.log")
        assert request.xtf_log_file_path == str(tmp_path / "lines_log.xtf")
        assert request.additional_catalogue_file_paths == (str(tmp_path / "catalogue.xml"),)
        assert request.is_geopackage is False

    def test_gpkg_extension_selects_geopackage(self):
        request = ValidationRequest.for_transfer_file(Path("/job"), "Data.GPKG", gpkg_model_names="A;B")
        assert request.is_geopackage is True
        assert request.gpkg_model_names == "A;B"


class TestProcessResult:
    def test_success_when_exit_zero(self):
        assert ProcessResult(exit_code=0).is_success is True

    def test_failure_when_nonzero_exit(self):
        assert ProcessResult(exit_code=1).is_success is False

    def test_failed_uses_sentinel(self):
        result = ProcessResult.failed("cancelled")
        assert result.exit_code == PROCESS_FAILED_EXIT_CODE
        assert result.error == "cancelled"
        assert result.is_success is False
