"""Bayesian linear regression.

Run `probdag check examples/regression.py` to validate the model graph.
"""

import numpy as np

import probdag as pg


def normal_lpdf(x, mean, sd):
    return -0.5 * ((x - mean) / sd) ** 2 - np.log(sd) - 0.5 * np.log(2 * np.pi)


def lognormal_lpdf(x, meanlog, sdlog):
    return normal_lpdf(np.log(x), meanlog, sdlog) - np.log(x)


rng = np.random.default_rng(1)
x_obs = rng.normal(size=20)
y_obs = 1.5 + 0.7 * x_obs + rng.normal(scale=0.3, size=20)

registry = pg.NodeRegistry()
with registry:
    intercept = pg.random_variable("normal", name="intercept", mean=0.0, sd=10.0, log_density=normal_lpdf)
    slope = pg.random_variable("normal", name="slope", mean=0.0, sd=10.0, log_density=normal_lpdf)
    sd = pg.random_variable("lognormal", name="sd", lower=0.0, meanlog=0.0, sdlog=1.0, log_density=lognormal_lpdf)

    x = pg.data(x_obs, name="x")
    trend = pg.operation(np.multiply, slope, x, operation_name="multiply")
    mean = pg.operation(np.add, intercept, trend, operation_name="add", name="mean")

    y = pg.data(y_obs, name="y")
    pg.distribution(y, "normal", mean=mean, sd=sd, log_density=normal_lpdf)


if __name__ == "__main__":
    m = pg.model(intercept, slope, sd, precision="double", registry=registry)
    print(m)
    print(m.log_density({intercept: 1.5, slope: 0.7, sd: 0.3}))
