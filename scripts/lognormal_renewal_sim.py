# %% [markdown]
# # Lognormal renewal process
#
# No closed form for the pmf of N(T) here; we estimate it by replication and
# compare the mean count with the elementary renewal approximation T/μ.

# %%
import numpy as np

from renewal_sim import Interarrival, estimate_distribution, pmf_table, summarize

np.set_printoptions(suppress=True, linewidth=120)

# %%
# Config
LOCATION = 0.0        # mean of log(X)
SCALE = 0.5           # sd of log(X)
HORIZONS = (10.0, 50.0, 200.0)
N_SIM = 5_000
MAX_DRAWS = 400
SEED = 7

# %%
dist = Interarrival.lognormal(LOCATION, SCALE)
rng = np.random.default_rng(SEED)
print(f"{dist}: mu = {dist.mean:.4f}, sigma = {dist.std:.4f}, 1/mu = {1 / dist.mean:.4f}\n")

for horizon in HORIZONS:
    sample = estimate_distribution(dist, None, horizon, N_SIM, MAX_DRAWS, rng=rng)
    summary = summarize(sample)
    print(
        f"T = {horizon:>6.1f}: E[N(T)] = {summary['mean']:8.3f}  (T/mu = {horizon / dist.mean:8.3f}), "
        f"N(T)/T = {summary['mean'] / horizon:.4f}, Var[N(T)] = {summary['variance']:.3f}"
    )

# %% [markdown]
# ## Empirical pmf at the shortest horizon

# %%
sample = estimate_distribution(dist, None, HORIZONS[0], N_SIM, MAX_DRAWS, rng=SEED)
print(pmf_table(sample).to_string(index=False, float_format=lambda x: f"{x:.4f}"))
