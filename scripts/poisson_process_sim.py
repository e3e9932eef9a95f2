# %% [markdown]
# # Poisson process: simulated N(T) vs. the Poisson(λT) pmf
#
# Exponential(λ) interarrival times are cumulative-summed into arrival times
# and N(T) counts the arrivals in (0, T]. Over many replications the empirical
# pmf of N(T) should match e^{-λT} (λT)^k / k!.

# %%
import numpy as np

from renewal_sim import (
    Interarrival,
    estimate_distribution,
    pmf_table,
    poisson_chisquare,
    poisson_pmf,
    summarize,
)

np.set_printoptions(suppress=True, linewidth=120)

# %%
# Config
RATE = 2.0            # lambda (arrivals per unit time)
HORIZON = 5.0         # T
N_SIM = 10_000        # replications (increase for better accuracy)
MAX_DRAWS = 100       # initial interarrival draws per replication
SEED = 42

# %%
dist = Interarrival.exponential(RATE)
sample = estimate_distribution(dist, None, HORIZON, N_SIM, MAX_DRAWS, rng=SEED)

# %% [markdown]
# ## Moments

# %%
summary = summarize(sample, rate=RATE)
print(f"{dist}, T = {HORIZON}, {N_SIM:,} replications")
print(f"Empirical   E[N(T)]   = {summary['mean']:.4f}")
print(f"Theoretical E[N(T)]   = {summary['expected_mean']:.4f}")
print(f"Empirical   Var[N(T)] = {summary['variance']:.4f}  (Poisson: {RATE * HORIZON:.4f})")
print(f"Relative error (mean) = {summary['rel_error']:.4%}")

# %% [markdown]
# ## pmf comparison and goodness of fit

# %%
table = pmf_table(sample, theoretical=lambda k: poisson_pmf(k, RATE, HORIZON))
print(table.to_string(index=False, float_format=lambda x: f"{x:.5f}"))

gof = poisson_chisquare(sample, RATE)
print(f"\nChi-square = {gof.statistic:.3f} on {gof.dof} dof, p-value = {gof.pvalue:.4f}")
print("Rejected at alpha = 0.01" if gof.rejects(0.01) else "Not rejected at alpha = 0.01")

# %%
k = 10
print(f"\nTheoretical P(N(T) = {k}) = {poisson_pmf(k, RATE, HORIZON):.6f}")
print(f"Empirical   P(N(T) = {k}) = {np.mean(sample.counts == k):.6f}")
