from mako.template import Template

STATE_TEMPLATE = Template(
	"""// State: ${state_id}
WebUIStateManager.createState(${state_id_literal}, ${value_literal});"""
)

BUTTON_HANDLER_TEMPLATE = Template(
	"""document.getElementById(${button_id_literal}).addEventListener('click', function() {
    ${action_code}
});"""
)

FORM_HANDLER_TEMPLATE = Template(
	"""document.getElementById(${form_id_literal}).addEventListener('submit', function(event) {
    event.preventDefault();
    const form = event.target;
% for field_literal, state_id_literal in updates:
    WebUIStateManager.setState(${state_id_literal}, form[${field_literal}].value);
% endfor
});"""
)
