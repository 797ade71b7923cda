import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import pandas as pd


def plot_prr_per_run(csv_file, output_file="prr_runs.png"):
    # Load the run summary
    df = pd.read_csv(csv_file)
    average = df['prr'].mean()

    fig, ax = plt.subplots(figsize=(10, 6))
    ax.bar(df['run'], df['prr'], color='tab:blue', alpha=0.8, label='PRR per run')
    ax.axhline(average, color='red', linestyle='--', label=f'Average: {average:.2f}%')

    # Labels
    ax.set_xlabel('Run', fontsize=10)
    ax.set_ylabel('Packet Reception Ratio [%]', fontsize=10)
    ax.set_title('Packet Reception Ratio per Run', fontsize=14)
    ax.set_xticks(df['run'])
    ax.set_ylim(0, 105)
    ax.grid(True, axis='y')

    plt.legend()
    plt.tight_layout()

    fig.savefig(output_file, dpi=150)
    plt.close(fig)
    return output_file
