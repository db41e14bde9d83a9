#!/usr/bin/env python3
"""
Shared fixtures for the ribotyper test suite
"""

import os

import pytest

from ribotyper.config import ConfigManager
from ribotyper.io.model_info import ModelInfo
from ribotyper.io.sequences import SequenceUniverse
from ribotyper.models.hit import Hit, Strand
from ribotyper.models.options import ClassificationOptions


MODEL_TABLE = [
    # model                  family  domain
    ("SSU_rRNA_archaea",      "SSU", "Archaea"),
    ("SSU_rRNA_bacteria",     "SSU", "Bacteria"),
    ("SSU_rRNA_cyanobacteria", "SSU", "Bacteria"),
    ("SSU_rRNA_eukarya",      "SSU", "Eukarya"),
    ("LSU_rRNA_bacteria",     "LSU", "Bacteria"),
]


@pytest.fixture
def model_info():
    """Lookup table with SSU and LSU models, all acceptable"""
    return ModelInfo(
        families={model: family for model, family, _ in MODEL_TABLE},
        domains={model: domain for model, _, domain in MODEL_TABLE},
    )


@pytest.fixture
def options():
    """Default classification options"""
    return ClassificationOptions()


@pytest.fixture
def universe():
    """Three sequences in input order"""
    return SequenceUniverse([("seq1", 100), ("seq2", 200), ("seq3", 150)])


@pytest.fixture
def make_hit(model_info):
    """Factory for hits with family and domain filled in from the model table"""
    def _make(target="seq1", model="SSU_rRNA_bacteria", seq_from=1, seq_to=100,
              score=50.0, evalue=None, model_from=None, model_to=None, strand=None):
        return Hit(
            target=target,
            model=model,
            family=model_info.family_of(model),
            domain=model_info.domain_of(model),
            seq_from=seq_from,
            seq_to=seq_to,
            strand=strand or Strand.from_coords(seq_from, seq_to),
            score=score,
            evalue=evalue,
            model_from=model_from,
            model_to=model_to,
        )
    return _make


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep RIBO_ variables from the calling shell out of configuration tests"""
    for key in list(os.environ):
        if key.startswith(ConfigManager.ENV_PREFIX):
            monkeypatch.delenv(key)
