from mako.template import Template

# render() re-evaluates declarative data-state-* bindings. It is called by
# every helper generated for a state property. Local scripts only touch the
# elements inside their container.
RENDER_TEMPLATE = Template(
	"""% if kind == "global":
// Global render function
function render() {
    const root = document;
% elif kind == "document":
// Document render function for: ${target}
function render() {
    const root = document;
% else:
// Local render function for: ${target}
function render() {
    const root = document.getElementById(${target_literal});
    if (!root) return;
% endif

    // Text bound to template literals over state variables
    root.querySelectorAll('[data-state-text]').forEach(element => {
        const template = element.getAttribute('data-state-text');
        try {
            element.textContent = eval('`' + template + '`');
        } catch (error) {
            console.error('WebUI: Error evaluating data-state-text "' + template + '":', error);
        }
    });

    // Visibility
    root.querySelectorAll('[data-state-show]').forEach(element => {
        const condition = element.getAttribute('data-state-show');
        try {
            element.style.display = eval(condition) ? '' : 'none';
        } catch (error) {
            console.error('WebUI: Error evaluating data-state-show "' + condition + '":', error);
        }
    });

    // Form values
    root.querySelectorAll('[data-state-value]').forEach(element => {
        const stateVar = element.getAttribute('data-state-value');
        let current;
        try {
            current = eval(stateVar);
        } catch (error) {
            return;
        }
        if (current !== undefined && element.value !== String(current)) {
            element.value = current;
        }
    });

    root.querySelectorAll('[data-state-checked]').forEach(element => {
        const stateVar = element.getAttribute('data-state-checked');
        try {
            element.checked = Boolean(eval(stateVar));
        } catch (error) {
            console.error('WebUI: Error evaluating data-state-checked "' + stateVar + '":', error);
        }
    });

    root.querySelectorAll('[data-state-disabled]').forEach(element => {
        const condition = element.getAttribute('data-state-disabled');
        try {
            element.disabled = Boolean(eval(condition));
        } catch (error) {
            console.error('WebUI: Error evaluating data-state-disabled "' + condition + '":', error);
        }
    });

    root.querySelectorAll('[data-state-classes]').forEach(element => {
        const expression = element.getAttribute('data-state-classes');
        const previous = (element.getAttribute('data-state-applied-classes') || '').split(' ').filter(Boolean);
        previous.forEach(name => element.classList.remove(name));
        let next = '';
        try {
            next = String(eval(expression) || '');
        } catch (error) {
            console.error('WebUI: Error evaluating data-state-classes "' + expression + '":', error);
        }
        const names = next.split(' ').filter(Boolean);
        names.forEach(name => element.classList.add(name));
        element.setAttribute('data-state-applied-classes', names.join(' '));
    });

    root.querySelectorAll('[data-state-style]').forEach(element => {
        const expression = element.getAttribute('data-state-style');
        try {
            element.style.cssText = String(eval(expression) || '');
        } catch (error) {
            console.error('WebUI: Error evaluating data-state-style "' + expression + '":', error);
        }
    });

% if kind == "global":
    // Custom render hooks
    if (typeof window.onStateRender === 'function') {
        window.onStateRender();
    }
% elif kind == "document":
    // Document-specific render hooks
    if (typeof window.onDocumentRender === 'function') {
        window.onDocumentRender();
    }
% else:
    // Local render hooks
    if (typeof window.onLocalRender === 'function') {
        window.onLocalRender(${target_literal});
    }
% endif
}

document.addEventListener('DOMContentLoaded', render);
"""
)
