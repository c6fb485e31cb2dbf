from .loaders import (
    calculation_from_dict,
    component_from_dict,
    components_from_dicts,
    day_rule_from_dict,
    input_from_dict,
    input_values_from_dict,
    load_components,
    load_input_values,
    period_from_dict,
)
