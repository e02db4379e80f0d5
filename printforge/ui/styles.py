"""
CSS styles for the PrintForge generation panel.
"""

PANEL_CSS = """
:root {
    --primary-color: #2563eb;
    --primary-light: #3b82f6;
    --success-color: #059669;
    --warning-color: #d97706;
    --error-color: #dc2626;
    --surface: #ffffff;
    --text-secondary: #64748b;
    --border-color: #e2e8f0;
    --radius: 8px;
}

.app-header {
    background: linear-gradient(135deg, var(--primary-color), var(--primary-light));
    color: white;
    text-align: center;
    padding: 1.5rem;
    border-radius: var(--radius);
    margin-bottom: 1.5rem;
}

.app-title {
    font-size: 2rem;
    font-weight: 700;
    margin-bottom: 0.25rem;
}

.section-card {
    background: var(--surface);
    border: 1px solid var(--border-color);
    border-radius: var(--radius);
    padding: 1rem;
}

.example-prompt button {
    font-size: 0.8rem;
    text-align: left;
}

.progress-bar {
    width: 100%;
    height: 10px;
    background: var(--border-color);
    border-radius: 5px;
    overflow: hidden;
}

.progress-fill {
    height: 100%;
    background: var(--primary-color);
    transition: width 0.3s ease;
}

.status-success { color: var(--success-color); }
.status-warning { color: var(--warning-color); }
.status-error { color: var(--error-color); }

.model-card {
    border: 1px solid var(--border-color);
    border-radius: var(--radius);
    padding: 1rem;
}

.model-card img {
    max-width: 100%;
    border-radius: var(--radius);
}

.metadata-grid {
    font-size: 0.9rem;
    color: var(--text-secondary);
}
"""
