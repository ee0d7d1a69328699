"""Static HTML dashboard that renders the live status feed."""

DASHBOARD_HTML = """<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <title>PMS Monitoring Dashboard</title>
    <style>
        body { font-family: Arial, sans-serif; margin: 20px; background: #f5f5f5; }
        .container { max-width: 1200px; margin: 0 auto; }
        .header { background: white; padding: 20px; border-radius: 8px; margin-bottom: 20px; box-shadow: 0 2px 4px rgba(0,0,0,0.1); }
        .services { display: grid; grid-template-columns: repeat(auto-fit, minmax(300px, 1fr)); gap: 20px; }
        .service-card { background: white; padding: 20px; border-radius: 8px; box-shadow: 0 2px 4px rgba(0,0,0,0.1); }
        .service-card.healthy { border-left: 4px solid #4CAF50; }
        .service-card.unhealthy { border-left: 4px solid #f44336; }
        .service-card.unknown { border-left: 4px solid #ff9800; }
        .status { font-weight: bold; text-transform: uppercase; }
        .healthy { color: #4CAF50; }
        .unhealthy { color: #f44336; }
        .unknown { color: #ff9800; }
        .metric { margin: 10px 0; }
        .metric label { font-weight: bold; margin-right: 10px; }
        .error { color: #f44336; }
        .last-updated { text-align: center; margin-top: 20px; color: #666; }
    </style>
</head>
<body>
    <div class="container">
        <div class="header">
            <h1>PMS Monitoring Dashboard</h1>
            <p>Real-time monitoring of all PMS microservices</p>
        </div>
        <div id="services" class="services">
            <div>Loading services...</div>
        </div>
        <div class="last-updated" id="lastUpdated"></div>
    </div>

    <script>
        const scheme = window.location.protocol === 'https:' ? 'wss://' : 'ws://';
        const ws = new WebSocket(scheme + window.location.host + '/ws');

        function escapeHtml(value) {
            const node = document.createElement('span');
            node.textContent = String(value);
            return node.innerHTML;
        }

        function renderService(service) {
            const error = service.error
                ? '<div class="metric"><label>Error:</label><span class="error">' + escapeHtml(service.error) + '</span></div>'
                : '';
            return '<div class="service-card ' + service.status + '">'
                + '<h3>' + escapeHtml(service.name.toUpperCase()) + '</h3>'
                + '<div class="metric"><label>Status:</label><span class="status ' + service.status + '">' + service.status + '</span></div>'
                + '<div class="metric"><label>Response Time:</label><span>' + service.responseTime + 'ms</span></div>'
                + '<div class="metric"><label>Uptime:</label><span>' + service.uptime + '%</span></div>'
                + '<div class="metric"><label>Last Check:</label><span>' + new Date(service.lastCheck).toLocaleTimeString() + '</span></div>'
                + error
                + '</div>';
        }

        ws.onmessage = function (event) {
            const message = JSON.parse(event.data);
            if (message.type !== 'status') {
                return;
            }
            document.getElementById('services').innerHTML = message.data.map(renderService).join('');
            if (message.timestamp) {
                document.getElementById('lastUpdated').textContent =
                    'Last updated: ' + new Date(message.timestamp).toLocaleString();
            }
        };

        ws.onclose = function () {
            document.getElementById('lastUpdated').textContent = 'Disconnected from monitoring service';
        };
    </script>
</body>
</html>
"""
