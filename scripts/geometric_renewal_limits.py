# %% [markdown]
# # Geometric renewal process: law of large numbers and CLT
#
# Interarrival times ~ Geometric(p) on {0, 1, ...}, mean μ = (1-p)/p and
# sd σ = sqrt((1-p)/p²).
#
# - LLN: N(T)/T -> 1/μ
# - CLT: Z = (N(T) - T/μ) / (σ sqrt(T/μ³)) is approximately Normal(0, 1)

# %%
import numpy as np

from renewal_sim import geom_rp

np.set_printoptions(suppress=True, linewidth=120)

# %%
# Config
P = 0.6
HORIZONS = (10, 100, 1_000)
N_SIM = 2_000
SEED = 2024

# %% [markdown]
# ## Law of large numbers

# %%
rng = np.random.default_rng(SEED)
results = {}
for horizon in HORIZONS:
    res = geom_rp(P, horizon, N_SIM, rng=rng, max_draws=int(2 * horizon) + 10)
    results[horizon] = res
    print(
        f"T = {horizon:>5}: N(T)/T = {res.lln_ratio:.4f}  (1/mu = {res.lln_target:.4f}, "
        f"error = {res.lln_error:.4f}), sd N(T) = {res.std_count:.3f}"
    )

# %% [markdown]
# ## Central limit theorem

# %%
for horizon, res in results.items():
    z = res.z_scores
    ks = res.clt_check()
    print(
        f"T = {horizon:>5}: mean Z = {z.mean():+.4f}, sd Z = {z.std(ddof=1):.4f}, "
        f"KS = {ks.statistic:.4f} (p = {ks.pvalue:.4f})"
    )
