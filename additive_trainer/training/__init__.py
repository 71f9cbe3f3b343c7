"""
Additive Model Training（FINAL）

One training run = init steps once, then `iterations` rounds of:

    sample -> bag -> per-bag online SGD -> average -> smooth
           -> write-back -> prune -> checkpoint

Ownership:
- The driver (TrainingPipeline + steps) owns the model
- Bag workers receive an immutable snapshot and return copies
- Only the driver writes to the model, strictly between rounds

Failure semantics:
- A failed bag is re-run (pure function of partition + snapshot + seed)
- A round that still fails commits nothing; the run fails
"""
