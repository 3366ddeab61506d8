import sys
import os
import pytest
sys.path.append(os.path.dirname(__file__))

from sample_flows import create_two_block_graph, create_outer_graph, create_survey_graph

EXAMPLES_DIR = os.path.join(os.path.dirname(__file__), "..", "examples")


@pytest.fixture
def two_block_graph():
    return create_two_block_graph()


@pytest.fixture
def outer_graph():
    return create_outer_graph()


@pytest.fixture
def survey_graph():
    return create_survey_graph()


@pytest.fixture
def examples_dir():
    return os.path.abspath(EXAMPLES_DIR)
