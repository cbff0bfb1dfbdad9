"""HTML dashboard for the health checker web interface.

The page is static: it loads the domain list from /config and fetches
/status for the selected domain from JavaScript.
"""

from string import Template

CSS_STYLES = """
        body {
            font-family: Arial, sans-serif;
            background-color: #f1f5f0;
            color: #2f4f4f;
            margin: 0;
            padding: 20px;
            text-align: center;
        }

        h1 {
            color: #5a7d64;
            margin-bottom: 30px;
        }

        label, select {
            font-size: 16px;
            margin-bottom: 20px;
        }

        select {
            padding: 5px 10px;
            border-radius: 4px;
            border: 1px solid #b2c2b4;
        }

        table {
            margin: 20px auto;
            border-collapse: collapse;
            width: 80%;
            max-width: 800px;
            background-color: #ffffff;
            box-shadow: 0 2px 8px rgba(0, 0, 0, 0.1);
        }

        th, td {
            border: 1px solid #b2c2b4;
            padding: 12px 20px;
            font-size: 14px;
        }

        th {
            background-color: #d9e8dd;
            color: #344e41;
        }

        tr:nth-child(even) { background-color: #f6f9f7; }
        td { word-break: break-all; }

        .status-ok { color: green; }
        .status-client { color: orange; }
        .status-server { color: red; }
        .status-error { color: gray; }
        .status-other { color: black; }

        #refreshBtn {
            margin-top: 20px;
            padding: 10px 20px;
            font-size: 16px;
        }

        #message { color: #8a8a8a; min-height: 1.2em; }
"""

# No "$" in here: the page is assembled with string.Template.
JS_CORE = """
        function statusClass(status) {
            if (status === 'OK') return 'status-ok';
            if (status.startsWith('HTTP 4')) return 'status-client';
            if (status.startsWith('HTTP 5')) return 'status-server';
            if (status.startsWith('ERROR')) return 'status-error';
            return 'status-other';
        }

        function setMessage(text) {
            document.getElementById('message').textContent = text;
        }

        async function fetchStatus() {
            const domain = document.getElementById('domainSelect').value;
            if (!domain) return;

            setMessage('Checking ' + domain + '...');
            let statuses;
            try {
                const response = await fetch('/status?domain=' + encodeURIComponent(domain));
                if (!response.ok) {
                    setMessage('Request failed: HTTP ' + response.status);
                    return;
                }
                statuses = await response.json();
            } catch (err) {
                setMessage('Request failed: ' + err);
                return;
            }

            const table = document.getElementById('statusTable');
            table.innerHTML = '';
            statuses.forEach(item => {
                const row = document.createElement('tr');

                const urlCell = document.createElement('td');
                urlCell.textContent = item.url;

                const statusCell = document.createElement('td');
                statusCell.textContent = item.status;
                statusCell.className = statusClass(item.status);

                row.appendChild(urlCell);
                row.appendChild(statusCell);
                table.appendChild(row);
            });
            setMessage('');
        }

        async function loadConfig() {
            const response = await fetch('/config');
            const config = await response.json();
            const domains = config.domains || [];

            const select = document.getElementById('domainSelect');
            domains.forEach(domain => {
                const option = document.createElement('option');
                option.value = domain;
                option.textContent = domain;
                select.appendChild(option);
            });

            select.addEventListener('change', fetchStatus);
            document.getElementById('refreshBtn').addEventListener('click', fetchStatus);

            if (domains.length > 0) {
                select.value = domains[0];
                fetchStatus();
            } else {
                setMessage('No domains configured');
            }
        }

        document.addEventListener('DOMContentLoaded', loadConfig);
"""

_TEMPLATE = Template("""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1">
    <title>URL Health Checker</title>
    <style>$css</style>
</head>
<body>
    <h1>URL Health Checker</h1>
    <label for="domainSelect">Select Domain:</label>
    <select id="domainSelect"></select>
    <p id="message"></p>
    <table>
        <thead>
            <tr>
                <th>URL</th>
                <th>Status</th>
            </tr>
        </thead>
        <tbody id="statusTable"></tbody>
    </table>
    <button id="refreshBtn" type="button">Refresh</button>
    <script>$js</script>
</body>
</html>
""")


def build_html(css: str, js: str) -> str:
    """Build the complete HTML dashboard from its components."""
    return _TEMPLATE.substitute(css=css, js=js)


HTML_DASHBOARD = build_html(CSS_STYLES, JS_CORE)
