import sys, os
import pandas as pd
import matplotlib.pyplot as plt

def main(p):
    df = pd.read_csv(p)
    # Runs that reported no result have empty cost/coverage
    ok = df.dropna(subset=["total_cost"])

    agg = ok.groupby("step_budget").agg(
        mean_cost=("total_cost", "mean"),
        std_cost=("total_cost", "std"),
        mean_coverage=("coverage", "mean"),
        std_coverage=("coverage", "std"),
        cancelled=("cancelled", "sum"),
    ).reset_index()
    print("\nAggregate:\n", agg)

    # Plot 1: total cost by step budget
    plt.figure(figsize=(7,4))
    plt.bar(agg["step_budget"].astype(str), agg["mean_cost"], yerr=agg["std_cost"].fillna(0))
    plt.title("Average total cost by step budget")
    plt.xlabel("Step budget")
    plt.ylabel("Total cost")
    out1 = os.path.join(os.path.dirname(p), "coverage_cost_bar.png")
    plt.tight_layout(); plt.savefig(out1, bbox_inches="tight"); plt.close()
    print("Saved:", out1)

    # Plot 2: fraction of cells visited by step budget
    plt.figure(figsize=(7,4))
    plt.bar(agg["step_budget"].astype(str), agg["mean_coverage"], yerr=agg["std_coverage"].fillna(0))
    plt.title("Average coverage by step budget")
    plt.xlabel("Step budget")
    plt.ylabel("Fraction of cells visited")
    plt.ylim(0, 1)
    out2 = os.path.join(os.path.dirname(p), "coverage_fraction_bar.png")
    plt.tight_layout(); plt.savefig(out2, bbox_inches="tight"); plt.close()
    print("Saved:", out2)

if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Usage: python plot_coverage.py <path/to/coverage.csv>")
        raise SystemExit(1)
    main(sys.argv[1])
