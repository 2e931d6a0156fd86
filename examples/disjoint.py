"""A registry whose tracked nodes form two disjoint graphs, one without a density.

`probdag check examples/disjoint.py` reports that the model contains
2 disjoint graphs.
"""

import probdag as pg

registry = pg.NodeRegistry()
with registry:
    mu = pg.variable(name="mu")
    pg.distribution(pg.data([0.2, 0.4]), "normal", mean=mu, sd=1.0)

    # Not connected to anything else, and not scored by any distribution
    tau = pg.variable(name="tau")
