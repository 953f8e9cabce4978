"""Server-rendered HTML pages."""

from html import escape

from seminar_tickets.domain.events import EventDetails
from seminar_tickets.domain.tickets import FulfillmentRecord
from seminar_tickets.services.records import total_tickets

SUPPORT_MESSAGE = (
    "Payment successful, but we failed to send your ticket. "
    "Please contact support."
)


def landing_page(event: EventDetails, unit_price: int) -> str:
    """Return the ticket purchase page."""
    return _LANDING_HTML.format(
        name=escape(event.name),
        tagline=escape(event.tagline),
        venue=escape(event.venue),
        location=escape(event.location),
        date=escape(event.date),
        time=escape(event.time),
        price=unit_price,
    )


def confirmation_page(reference: str, email: str) -> str:
    """Return the page shown after a ticket has been emailed."""
    return f"""<div style="font-family: sans-serif; text-align: center; padding: 50px;">
  <h1 style="color: #A83236;">Payment Successful!</h1>
  <p>Thank you for your payment.</p>
  <p>Your ticket (<strong>{escape(reference)}</strong>) has been emailed to
  <strong>{escape(email)}</strong>.</p>
  <p>Please check your inbox (and spam folder).</p>
  <br>
  <a href="/marital-grace" style="text-decoration: none; background: #333;
  color: white; padding: 10px 20px; border-radius: 5px;">Return to Home</a>
</div>"""


def message_page(message: str) -> str:
    """Return a plain page carrying a single message."""
    return (
        '<div style="font-family: sans-serif; text-align: center; padding: 50px;">'
        f"<p>{escape(message)}</p></div>"
    )


def dashboard_page(title: str, records: list[FulfillmentRecord]) -> str:
    """Return the guest list table."""
    rows = "".join(
        '<tr style="border-bottom: 1px solid #ddd;">'
        f'<td style="padding:10px;">{record.created_at.date().isoformat()}</td>'
        f'<td style="padding:10px;">{escape(record.name)}</td>'
        f'<td style="padding:10px;">{escape(record.email)}</td>'
        f'<td style="padding:10px;"><strong>{escape(record.reference)}</strong></td>'
        f'<td style="padding:10px;">{record.quantity}</td>'
        "</tr>"
        for record in records
    )
    if not rows:
        rows = (
            '<tr><td colspan="5" style="padding:20px; text-align:center;">'
            "No tickets sold yet.</td></tr>"
        )
    return _DASHBOARD_HTML.format(
        title=escape(title), rows=rows, total=total_tickets(records)
    )


_DASHBOARD_HTML = """<div style="font-family:sans-serif; padding:40px; max-width:900px;
 margin:auto;">
  <h2>{title} - Guest List</h2>
  <table style="width:100%; border-collapse:collapse; background:white;
   box-shadow:0 2px 10px rgba(0,0,0,0.1);">
    <thead style="background:#A83236; color:white;">
      <tr>
        <th style="padding:10px; text-align:left;">Date</th>
        <th style="padding:10px; text-align:left;">Name</th>
        <th style="padding:10px; text-align:left;">Email</th>
        <th style="padding:10px; text-align:left;">Reference</th>
        <th style="padding:10px; text-align:left;">Qty</th>
      </tr>
    </thead>
    <tbody>{rows}</tbody>
  </table>
  <p style="margin-top:20px; font-size:0.8rem; color:gray;">
    Total Tickets Sold: {total}</p>
</div>
"""

_LANDING_HTML = """<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>{name}</title>
    <style>
      body {{ font-family: ui-sans-serif, system-ui, sans-serif; margin: 0;
        background: #F2EFE9; color: #222; }}
      main {{ max-width: 560px; margin: 3rem auto; padding: 2rem;
        background: white; border-radius: 8px; }}
      h1 {{ color: #A83236; margin-bottom: 0.2rem; }}
      label {{ display: block; margin-top: 0.8rem; }}
      input {{ padding: 0.5rem; width: 100%; box-sizing: border-box; }}
      button {{ margin-top: 1.2rem; padding: 0.7rem 1.4rem; background: #A83236;
        color: white; border: 0; border-radius: 4px; cursor: pointer; }}
      #status {{ margin-top: 1rem; font-weight: bold; }}
    </style>
  </head>
  <body>
    <main>
      <h1>{name}</h1>
      <p>{tagline}</p>
      <p>{venue}, {location}<br />{date} at {time}</p>
      <p>R{price} per ticket</p>
      <form id="order">
        <label>First name <input id="firstName" /></label>
        <label>Last name <input id="lastName" /></label>
        <label>Email <input id="email" type="email" required /></label>
        <label>Tickets <input id="quantity" type="number" min="1" value="1" /></label>
        <button type="submit">Buy tickets</button>
      </form>
      <p id="status"></p>
    </main>
    <script>
      const statusEl = document.getElementById('status');
      const params = new URLSearchParams(window.location.search);

      async function postJson(path, body) {{
        const res = await fetch(path, {{
          method: 'POST',
          headers: {{ 'Content-Type': 'application/json' }},
          body: JSON.stringify(body)
        }});
        return {{ ok: res.ok, data: await res.json() }};
      }}

      document.getElementById('order').addEventListener('submit', async (e) => {{
        e.preventDefault();
        statusEl.textContent = 'Redirecting to payment...';
        const result = await postJson('/create-checkout', {{
          email: document.getElementById('email').value,
          quantity: Number(document.getElementById('quantity').value),
          firstName: document.getElementById('firstName').value || null,
          lastName: document.getElementById('lastName').value || null
        }});
        if (result.ok && result.data.redirectUrl) {{
          window.location.href = result.data.redirectUrl;
        }} else {{
          statusEl.textContent = result.data.error || 'Checkout failed';
        }}
      }});

      if (params.get('payment_success') === 'true') {{
        statusEl.textContent = 'Payment received. Sending your ticket...';
        postJson('/send-ticket', {{
          email: params.get('email'),
          quantity: Number(params.get('qty') || 1),
          firstName: params.get('firstName'),
          lastName: params.get('lastName')
        }}).then((result) => {{
          statusEl.textContent = result.ok
            ? 'Your ticket ' + result.data.ref + ' has been emailed to you.'
            : result.data.error;
          window.history.replaceState(null, '', window.location.pathname);
        }});
      }} else if (params.get('payment_cancelled') === 'true') {{
        statusEl.textContent = 'Payment cancelled.';
      }} else if (params.get('payment_failed') === 'true') {{
        statusEl.textContent = 'Payment failed. Please try again.';
      }}
    </script>
  </body>
</html>
"""
