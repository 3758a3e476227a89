"""Deal Submission: Streamlit form that posts through the gateway."""

from datetime import date

import streamlit as st

from api_client import GATEWAY_URL, submit_deal

st.set_page_config(page_title="Deal Submission", layout="centered")

st.title("Submit Deal")
st.caption(f"Submissions are forwarded via {GATEWAY_URL}")

with st.form("deal_form"):
    col1, col2 = st.columns(2)
    with col1:
        dealer = st.text_input("Dealer")
        customer = st.text_input("Customer")
        status = st.selectbox("Status", ["Pending", "Approved", "Funded", "Cancelled"])
    with col2:
        amount = st.number_input("Amount ($)", min_value=0.0, value=25000.0, step=500.0)
        deal_date = st.date_input("Deal Date", value=date.today())

    submitted = st.form_submit_button("Submit Deal", use_container_width=True)

if submitted:
    payload = {
        "dealer": dealer.strip(),
        "customer": customer.strip(),
        "amount": amount,
        "dealDate": deal_date.isoformat(),
        "status": status,
    }

    try:
        status_code, result = submit_deal(payload)
    except Exception as e:
        st.error(f"Error: {e}")
    else:
        if result.get("ok"):
            st.success(f"Deal submitted | Upstream status: {result['upstreamStatus']}")
        elif status_code == 400:
            missing = ", ".join(result.get("missing", []))
            st.warning(f"{result.get('error')}: {missing}" if missing else result.get("error", "Bad request"))
        else:
            st.error(f"Gateway returned {status_code}: {result.get('error', 'Unknown error')}")

        with st.expander("Full Gateway Response"):
            st.json(result)
