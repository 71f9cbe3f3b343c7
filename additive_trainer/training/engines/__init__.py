"""
Additive Model Train Engines (FINAL)

Engines hold the numeric semantics of additive-model training.
Steps bind them to a TrainingContext; engines never touch the context.

- sampling_engine      : Bernoulli sampling / bag partitioning / seeds
- loss_engine          : pointwise losses + SGD update of one example
- bag_sgd_engine       : per-bag online SGD and bag averaging
- model_init_engine    : feature statistics + function initialization
- prior_engine         : "family,name,v0,v1" prior parsing and seeding
- smoothing_engine     : conditional polynomial smoothing of splines
- prune_engine         : removal of near-zero splines

Guarantees:
- A bag's output is a pure function of (bag examples, snapshot, bag seed)
- The shared model snapshot is never mutated by an engine
"""
