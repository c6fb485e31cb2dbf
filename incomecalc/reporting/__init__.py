from .frames import component_totals, monthly_totals, results_to_frame
