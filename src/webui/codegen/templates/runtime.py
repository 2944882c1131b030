from mako.template import Template

# Client-side state runtime. Exposes window.WebUIStateManager; every state is
# a Proxy whose writes update bound elements, notify listeners, persist and
# record debug history.
RUNTIME_TEMPLATE = Template(
	"""/**
 * WebUI State Management Framework
 * Pure vanilla JavaScript state management with reactive updates
 */
(function() {
    'use strict';

    // Global state storage
    const states = new Map();
    const listeners = new Map();
    const elements = new Map();
    const changeHistory = [];

    // Configuration
    const enablePersistence = ${enable_persistence};
    const enableDebugging = ${enable_debugging};
    const storageType = '${storage_type}';
    const maxDebugHistory = ${max_debug_history};
    const storagePrefix = 'webui:';

% if enable_dev_sync:
    const reconnectDelay = ${reconnect_delay_ms};
    const maxReconnectAttempts = ${max_reconnect_attempts};
    let socket = null;
    let reconnectAttempts = 0;
% endif
    let applyingRemote = false;

    function storage() {
        if (!enablePersistence || storageType === 'memory') return null;
        try {
            return storageType === 'sessionStorage' ? window.sessionStorage : window.localStorage;
        } catch (error) {
            return null;
        }
    }

    function loadPersisted(id, fallback) {
        const backend = storage();
        if (!backend) return fallback;
        try {
            const raw = backend.getItem(storagePrefix + id);
            return raw === null ? fallback : JSON.parse(raw);
        } catch (error) {
            console.error('WebUI: Error reading persisted state ' + id + ':', error);
            return fallback;
        }
    }

    function persist(id, value) {
        const backend = storage();
        if (!backend) return;
        try {
            backend.setItem(storagePrefix + id, JSON.stringify(value));
        } catch (error) {
            console.error('WebUI: Error persisting state ' + id + ':', error);
        }
    }

    function recordChange(id, oldValue, newValue) {
        if (!enableDebugging) return;
        changeHistory.push({ id: id, oldValue: oldValue, newValue: newValue, timestamp: Date.now() });
        while (changeHistory.length > maxDebugHistory) {
            changeHistory.shift();
        }
        console.log('WebUI: ' + id + ' changed', oldValue, '->', newValue);
    }

    function inputValue(target) {
        if (target.type === 'checkbox') {
            return target.checked;
        }
        if (target.type === 'number' || target.type === 'range') {
            return parseFloat(target.value) || 0;
        }
        return target.value;
    }

    function defaultProperty(element) {
        if (element.tagName === 'INPUT' && (element.type === 'checkbox' || element.type === 'radio')) {
            return 'checked';
        }
        if (element.tagName === 'INPUT' || element.tagName === 'TEXTAREA' || element.tagName === 'SELECT') {
            return 'value';
        }
        return 'textContent';
    }

    const manager = {

        /**
         * Creates a new reactive state instance
         * @param {string} id - Unique identifier for the state
         * @param {*} initialValue - Initial value for the state
         */
        createState(id, initialValue) {
            const stateProxy = new Proxy({ value: loadPersisted(id, initialValue) }, {
                set(target, property, value) {
                    if (property !== 'value') {
                        return false;
                    }
                    const oldValue = target.value;
                    target.value = value;
                    manager.updateDOM(id, value);
                    manager.notifyListeners(id, value);
                    persist(id, value);
                    recordChange(id, oldValue, value);
                    return true;
                },

                get(target, property) {
                    return target[property];
                }
            });

            states.set(id, stateProxy);
            if (!listeners.has(id)) {
                listeners.set(id, new Set());
            }
            manager.updateDOM(id, stateProxy.value);
            return stateProxy;
        },

        /**
         * Whether a state with this identifier exists
         * @param {string} id - State identifier
         */
        hasState(id) {
            return states.has(id);
        },

        /**
         * Gets the current value of a state
         * @param {string} id - State identifier
         * @returns {*} Current state value
         */
        getState(id) {
            const state = states.get(id);
            return state ? state.value : undefined;
        },

        /**
         * Sets the value of a state, creating it when unknown
         * @param {string} id - State identifier
         * @param {*} value - New value
         */
        setState(id, value) {
            let state = states.get(id);
            if (!state) {
                state = manager.createState(id, undefined);
            }
            state.value = value;
% if enable_dev_sync:
            if (!applyingRemote && socket && socket.readyState === WebSocket.OPEN) {
                socket.send(JSON.stringify({ type: 'stateChange', stateId: id, value: value }));
            }
% endif
            manager.render();
        },

        getValue(id) {
            return manager.getState(id);
        },

        setValue(id, value) {
            manager.setState(id, value);
        },

        /**
         * Subscribes to state changes
         * @param {string} id - State identifier
         * @param {Function} callback - Callback function to execute on change
         * @returns {Function} Function removing the subscription
         */
        subscribe(id, callback) {
            if (!listeners.has(id)) {
                listeners.set(id, new Set());
            }
            listeners.get(id).add(callback);
            return () => manager.unsubscribe(id, callback);
        },

        /**
         * Unsubscribes from state changes
         * @param {string} id - State identifier
         * @param {Function} callback - Callback function to remove
         */
        unsubscribe(id, callback) {
            const stateListeners = listeners.get(id);
            if (stateListeners) {
                stateListeners.delete(callback);
            }
        },

        /**
         * Binds a DOM element to a state
         * @param {string} stateId - State identifier
         * @param {Element|string} target - DOM element or element ID
         * @param {string} property - Element property to bind (value, textContent, etc.)
         */
        bindElement(stateId, target, property) {
            const element = typeof target === 'string' ? document.getElementById(target) : target;
            if (!element) return;
            property = property || defaultProperty(element);

            if (!elements.has(stateId)) {
                elements.set(stateId, new Set());
            }
            elements.get(stateId).add({ element: element, property: property });

            const currentValue = manager.getState(stateId);
            if (currentValue !== undefined) {
                manager.updateElementProperty(element, property, currentValue);
            }

            // Two-way binding for form controls
            if (element.tagName === 'INPUT' || element.tagName === 'TEXTAREA' || element.tagName === 'SELECT') {
                const eventName = (element.type === 'checkbox' || element.type === 'radio' || element.tagName === 'SELECT') ? 'change' : 'input';
                element.addEventListener(eventName, (event) => {
                    manager.setState(stateId, inputValue(event.target));
                });
            }
        },

        /**
         * Updates DOM elements bound to a state
         * @param {string} stateId - State identifier
         * @param {*} value - New value
         */
        updateDOM(stateId, value) {
            const boundElements = elements.get(stateId);
            if (boundElements) {
                boundElements.forEach(({ element, property }) => {
                    manager.updateElementProperty(element, property, value);
                });
            }
        },

        /**
         * Updates a specific property of a DOM element
         * @param {Element} element - DOM element
         * @param {string} property - Property to update
         * @param {*} value - New value
         */
        updateElementProperty(element, property, value) {
            switch (property) {
                case 'textContent':
                    element.textContent = value === undefined || value === null ? '' : String(value);
                    break;
                case 'innerHTML':
                    element.innerHTML = String(value);
                    break;
                case 'value':
                    if (element.type === 'checkbox') {
                        element.checked = Boolean(value);
                    } else {
                        element.value = value === undefined || value === null ? '' : String(value);
                    }
                    break;
                case 'checked':
                    element.checked = Boolean(value);
                    break;
                case 'disabled':
                    element.disabled = Boolean(value);
                    break;
                case 'className':
                    element.className = String(value);
                    break;
                default:
                    element.setAttribute(property, String(value));
            }
        },

        /**
         * Notifies all listeners of a state change
         * @param {string} id - State identifier
         * @param {*} value - New value
         */
        notifyListeners(id, value) {
            const stateListeners = listeners.get(id);
            if (stateListeners) {
                Array.from(stateListeners).forEach(callback => {
                    try {
                        callback(value);
                    } catch (error) {
                        console.error('Error in state listener for ' + id + ':', error);
                    }
                });
            }
        },

        /**
         * Runs a declarative "scope.key.operation" action
         * @param {string} action - Action triple from a data-on* attribute
         * @param {Event} event - Triggering DOM event
         */
        performAction(action, event) {
            const separator = action.lastIndexOf('.');
            if (separator <= 0) {
                console.warn('WebUI: Invalid state action "' + action + '"');
                return;
            }
            const id = action.slice(0, separator);
            const operation = action.slice(separator + 1);
            switch (operation) {
                case 'toggle':
                    manager.setState(id, !manager.getState(id));
                    break;
                case 'increment':
                    manager.setState(id, (manager.getState(id) || 0) + 1);
                    break;
                case 'decrement':
                    manager.setState(id, (manager.getState(id) || 0) - 1);
                    break;
                case 'set':
                    if (event && event.target) {
                        manager.setState(id, inputValue(event.target));
                    }
                    break;
                default:
                    console.warn('WebUI: Unknown state operation "' + operation + '"');
            }
        },

        /**
         * Applies a value received from the development server
         * @param {string} id - State identifier
         * @param {*} value - New value
         */
        applyRemote(id, value) {
            applyingRemote = true;
            try {
                manager.setState(id, value);
            } finally {
                applyingRemote = false;
            }
        },

        /**
         * Refreshes declarative bindings after a change
         */
        render() {
            if (typeof window.render === 'function') {
                try {
                    window.render();
                } catch (error) {
                    console.error('WebUI: Error in render():', error);
                }
            }
        },
% if enable_dev_sync:

        /**
         * Sets up server synchronization via WebSocket
         * @param {string} url - WebSocket server URL
         */
        setupServerSync(url = ${dev_server_url}) {
            if (typeof WebSocket === 'undefined') return null;

            let ws;
            try {
                ws = new WebSocket(url);
            } catch (error) {
                console.error('WebUI: Could not connect to development server:', error);
                return null;
            }
            socket = ws;

            ws.onopen = () => {
                reconnectAttempts = 0;
                console.log('WebUI: Connected to development server');
            };

            ws.onmessage = (event) => {
                try {
                    const message = JSON.parse(event.data);
                    if (message.type === 'stateUpdate') {
                        manager.applyRemote(message.stateId, message.value);
                    } else if (message.type === 'state-update') {
                        manager.applyRemote(message.scope + '.' + message.key, message.value);
                    } else if (message.type === 'reload') {
                        window.location.reload();
                    }
                } catch (error) {
                    console.error('WebUI: Error processing server message:', error);
                }
            };

            // Errors are always followed by a close event
            ws.onerror = () => {};

            ws.onclose = () => {
                if (socket === ws) {
                    socket = null;
                }
                console.log('WebUI: Disconnected from development server');
                if (maxReconnectAttempts !== null && reconnectAttempts >= maxReconnectAttempts) {
                    return;
                }
                reconnectAttempts += 1;
                // Attempt to reconnect after a fixed delay
                setTimeout(() => manager.setupServerSync(url), reconnectDelay);
            };

            return ws;
        },
% endif

        /**
         * Recorded state changes, oldest first
         */
        history() {
            return changeHistory.slice();
        },

        /**
         * Debug utility to inspect all states
         */
        debug() {
            const stateSnapshot = {};
            states.forEach((state, id) => {
                stateSnapshot[id] = state.value;
            });
            console.log('WebUI State Snapshot:', stateSnapshot);
            return stateSnapshot;
        }
    };

    window.WebUIStateManager = manager;
})();"""
)

# Wires declarative bindings once the document is ready.
INIT_TEMPLATE = Template(
	"""// Initialize WebUI when DOM is ready
(function() {
    function initialize() {
        // Auto-bind elements with data-webui-state attributes
        document.querySelectorAll('[data-webui-state]').forEach(element => {
            const stateId = element.getAttribute('data-webui-state');
            const property = element.getAttribute('data-webui-property') || 'textContent';
            WebUIStateManager.bindElement(stateId, element, property);
        });

        // Scoped state shown by data-state="scope.key"
        document.querySelectorAll('[data-state]').forEach(element => {
            WebUIStateManager.bindElement(element.getAttribute('data-state'), element);
        });

        // Declarative actions: data-on<event>="scope.key.operation"
        ['click', 'dblclick', 'input', 'change', 'submit', 'keyup', 'keydown', 'focus', 'blur'].forEach(eventName => {
            document.querySelectorAll('[data-on' + eventName + ']').forEach(element => {
                const action = element.getAttribute('data-on' + eventName);
                element.addEventListener(eventName, (event) => {
                    WebUIStateManager.performAction(action, event);
                });
            });
        });
% if enable_dev_sync:

        // Set up development server connection in development mode
        const host = window.location.hostname;
        if (host === 'localhost' || host === '127.0.0.1' || host === '::1' || host === '[::1]') {
            WebUIStateManager.setupServerSync();
        }
% endif

        WebUIStateManager.render();
        console.log('WebUI: State management initialized with states:', [${state_ids}]);
    }

    if (document.readyState === 'loading') {
        document.addEventListener('DOMContentLoaded', initialize);
    } else {
        initialize();
    }
})();"""
)
