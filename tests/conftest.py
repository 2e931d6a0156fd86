import numpy as np
import pytest

import probdag as pg


def normal_lpdf(x, mean, sd):
    return -0.5 * ((x - mean) / sd) ** 2 - np.log(sd) - 0.5 * np.log(2 * np.pi)


@pytest.fixture
def registry() -> pg.NodeRegistry:
    return pg.NodeRegistry()


@pytest.fixture
def simple_registry() -> pg.NodeRegistry:
    """mu and sigma scoring three observations through a normal density."""
    registry = pg.NodeRegistry()
    with registry:
        mu = pg.variable(name="mu")
        sigma = pg.variable(name="sigma", lower=0.0)
        y = pg.data([0.5, -0.2, 1.1], name="y")
        pg.distribution(y, "normal", mean=mu, sd=sigma, log_density=normal_lpdf, name="likelihood")
    return registry
