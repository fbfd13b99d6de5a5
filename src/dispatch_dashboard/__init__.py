"""Client-side state, rendering and orchestration for the delivery-dispatch dashboard."""
