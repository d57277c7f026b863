"""Calculation notification e-mail templates"""

SUBJECT_TEMPLATE = "New Property Calculation - {price} ({user_email})"

ROW_TEMPLATE = """\
          <div class="row"><span>{label}:</span><span>{value}</span></div>
"""

SECTION_TEMPLATE = """\
      <div class="section">
        <div class="section-header">{title}</div>
        <div class="section-content">
{rows}        </div>
      </div>
"""

EMAIL_TEMPLATE = """\
<!DOCTYPE html>
<html>
  <head>
    <style>
      body {{ font-family: Arial, sans-serif; line-height: 1.6; color: #333; max-width: 800px; margin: 0 auto; }}
      .header {{ background: linear-gradient(135deg, #667eea 0%, #764ba2 100%); color: white; padding: 20px; text-align: center; }}
      .content {{ padding: 20px; }}
      .section {{ margin-bottom: 20px; border: 1px solid #e0e0e0; border-radius: 8px; overflow: hidden; }}
      .section-header {{ background: #f5f5f5; padding: 15px; font-weight: bold; border-bottom: 1px solid #e0e0e0; }}
      .section-content {{ padding: 15px; }}
      .row {{ display: flex; justify-content: space-between; padding: 8px 0; border-bottom: 1px solid #f0f0f0; }}
      .total-row {{ background: #e8f5e8; font-weight: bold; padding: 12px; }}
      .highlight {{ background: linear-gradient(135deg, #667eea, #764ba2); color: white; padding: 15px; text-align: center; font-size: 18px; font-weight: bold; }}
    </style>
  </head>
  <body>
    <div class="header">
      <h1>Spanish Property Calculation Report</h1>
      <p>New calculation submitted from your property calculator</p>
    </div>
    <div class="content">
{sections}
      <div class="total-row">
        <div class="row"><span>Total Purchase Price:</span><span>{total_purchase}</span></div>
      </div>
      <div class="highlight">
        Additional costs represent {cost_share} of the property price
      </div>
      <p style="text-align: center; margin-top: 30px; color: #666; font-size: 14px;">
        This email was automatically generated from your Spanish Property Calculator<br>
        Generated on {generated_at}
      </p>
    </div>
  </body>
</html>
"""
