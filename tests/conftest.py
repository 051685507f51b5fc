import matplotlib

# Headless backend for the plotting helpers.
matplotlib.use("Agg")
