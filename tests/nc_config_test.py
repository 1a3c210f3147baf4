# Copyright 2026 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#
# SPDX-License-Identifier: Apache-2.0


"""Tests for nocyclic.config module."""

from __future__ import annotations

import dataclasses
from pathlib import Path

import pytest
from nocyclic._run import DEFAULT_TIMEOUT_SECONDS
from nocyclic.config import CheckConfig, resolve_config
from nocyclic.errors import E, NoCyclicError


class TestResolveConfig:
    """resolve_config merges CLI values with the environment."""

    def test_defaults(self) -> None:
        """An empty environment gives the defaults."""
        cfg = resolve_config(environ={})
        assert cfg == CheckConfig(cargo='cargo', manifest_path=None, timeout=DEFAULT_TIMEOUT_SECONDS)

    def test_cargo_from_environment(self) -> None:
        """CARGO selects the cargo executable."""
        cfg = resolve_config(environ={'CARGO': '/home/dev/.cargo/bin/cargo'})
        assert cfg.cargo == '/home/dev/.cargo/bin/cargo'

    def test_empty_cargo_falls_back(self) -> None:
        """An empty CARGO value is ignored."""
        assert resolve_config(environ={'CARGO': ''}).cargo == 'cargo'

    def test_timeout_from_environment(self) -> None:
        """NOCYCLIC_TIMEOUT overrides the timeout."""
        assert resolve_config(environ={'NOCYCLIC_TIMEOUT': '30'}).timeout == 30

    @pytest.mark.parametrize('raw', ['abc', '0', '-5', ''])
    def test_invalid_timeout(self, raw: str) -> None:
        """Non-positive or non-numeric timeouts are rejected."""
        with pytest.raises(NoCyclicError) as exc_info:
            resolve_config(environ={'NOCYCLIC_TIMEOUT': raw})
        assert exc_info.value.code == E.CONFIG_INVALID_VALUE

    def test_existing_manifest(self, tmp_path: Path) -> None:
        """An existing manifest path is kept as a Path."""
        manifest = tmp_path / 'Cargo.toml'
        manifest.write_text('[workspace]\nmembers = []\n', encoding='utf-8')
        cfg = resolve_config(manifest_path=str(manifest), environ={})
        assert cfg.manifest_path == manifest

    def test_missing_manifest(self, tmp_path: Path) -> None:
        """A manifest path that does not exist fails before cargo runs."""
        with pytest.raises(NoCyclicError) as exc_info:
            resolve_config(manifest_path=tmp_path / 'Cargo.toml', environ={})
        assert exc_info.value.code == E.MANIFEST_NOT_FOUND

    def test_frozen(self) -> None:
        """CheckConfig is immutable."""
        with pytest.raises(dataclasses.FrozenInstanceError):
            CheckConfig().__setattr__('cargo', 'other')
