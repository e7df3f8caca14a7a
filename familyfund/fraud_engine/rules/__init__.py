"""One module per signal category; each returns at most one FraudSignal."""
