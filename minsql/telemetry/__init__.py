"""Runtime counters and a periodic metrics report."""